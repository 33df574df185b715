"""Room-scoped ephemeral relay store (composition root)."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .errors import ValidationError
from .expiry import Millis, now_ms
from .messages import MessageRecord, RoomMessageLog
from .participants import RoomKeyDirectory, normalize_entry

logger = logging.getLogger(__name__)

__all__ = ["RelayStore", "ValidationError"]


def _valid_room(room_id: Any) -> bool:
    return isinstance(room_id, str) and room_id != ""


class RelayStore:
    """Owns one message log and one key directory, both keyed by room id.

    Nothing here understands the payloads: ciphertext, signatures and keys
    are stored and handed back verbatim. Rooms exist implicitly once
    something is written to them and disappear only through :meth:`wipe`.

    Parameters
    ----------
    messages, participants :
        Optional pre-built structures (handy for tests or for seeding legacy
        data). Fresh, empty ones are created otherwise.
    clock :
        Callable returning "now" in epoch milliseconds.
    """

    def __init__(
        self,
        messages: Optional[RoomMessageLog] = None,
        participants: Optional[RoomKeyDirectory] = None,
        clock: Callable[[], Millis] = now_ms,
    ) -> None:
        self.messages = messages if messages is not None else RoomMessageLog()
        self.participants = participants if participants is not None else RoomKeyDirectory()
        self.clock = clock

    # --------- messages ----------
    def post_message(self, room_id: Any, fields: Mapping[str, Any]) -> None:
        if not _valid_room(room_id) or fields.get("encrypted") is None:
            logger.debug("Rejected message post (room=%r)", room_id)
            raise ValidationError("roomId and encrypted required")
        record = MessageRecord.build(fields, self.clock())
        self.messages.append(room_id, record)

    def get_messages(self, room_id: Any, now: Optional[Millis] = None) -> List[Dict[str, Any]]:
        if not _valid_room(room_id):
            raise ValidationError("roomId required")
        if now is None:
            now = self.clock()
        active = self.messages.list_active(room_id, now)
        logger.debug("Room %s: %d active message(s)", room_id, len(active))
        return [m.to_dict() for m in active]

    # --------- participants ----------
    def post_participant(self, room_id: Any, alias: Any, public_key: Any = None) -> None:
        if not _valid_room(room_id):
            raise ValidationError("roomId and alias required")
        self.participants.upsert(room_id, alias, public_key)

    def get_participants(self, room_id: Any) -> List[Dict[str, str]]:
        if not _valid_room(room_id):
            raise ValidationError("roomId required")
        return [normalize_entry(p).to_dict() for p in self.participants.list(room_id)]

    # --------- wipe ----------
    def wipe(self, room_ids: Iterable[Any]) -> int:
        """Delete messages and participants for every named room.

        Returns how many of the given ids referred to an existing room.
        Unknown and non-string ids are skipped silently.
        """
        if not isinstance(room_ids, (list, tuple)):
            room_ids = []
        purged = 0
        for rid in room_ids:
            if not isinstance(rid, str):
                continue
            if rid in self.messages or rid in self.participants:
                purged += 1
            self.messages.delete_room(rid)
            self.participants.delete_room(rid)
        logger.info("Wipe requested for %d room(s), %d purged", len(room_ids), purged)
        return purged
