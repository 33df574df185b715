"""Per-room, append-only log of encrypted message records."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .expiry import Millis, expires_at_for, is_active, utc_timestamp

logger = logging.getLogger(__name__)


# -----------------------------
# Coercion helpers
# -----------------------------
def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _as_flag(value: Any) -> bool:
    # Only null, false, zero and "" count as false; empty lists/objects are true.
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)):
        return value == value and value != 0
    return True


def _as_index(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return int(bool(value))
    try:
        n = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(n, 0)


# -----------------------------
# Data model
# -----------------------------
@dataclass(frozen=True)
class MessageRecord:
    """One relayed message.

    The store never looks inside ``encrypted`` or ``signature``; both are
    returned exactly as they were posted. ``expires_at`` is fixed when the
    record is built and is never extended afterwards.
    """
    encrypted: str
    is_me: bool = False
    at: str = ""
    ratchet_index: int = 0
    sender_alias: str = ""
    signature: str = ""
    expires_at: Optional[Millis] = None

    @classmethod
    def build(cls, fields: Mapping[str, Any], now: Millis) -> "MessageRecord":
        """Create a record from caller-supplied wire fields, applying defaults."""
        at = fields.get("at")
        sender_alias = fields.get("senderAlias")
        signature = fields.get("signature")
        return cls(
            encrypted=_as_text(fields.get("encrypted")),
            is_me=_as_flag(fields.get("isMe")),
            at=str(at) if at else utc_timestamp(),
            ratchet_index=_as_index(fields.get("ratchetIndex")),
            sender_alias=str(sender_alias) if sender_alias is not None else "",
            signature=str(signature) if signature is not None else "",
            expires_at=expires_at_for(fields.get("expiresIn"), now),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "encrypted": self.encrypted,
            "isMe": self.is_me,
            "at": self.at,
            "ratchetIndex": self.ratchet_index,
            "senderAlias": self.sender_alias,
            "signature": self.signature,
            "expiresAt": self.expires_at,
        }


# -----------------------------
# RoomMessageLog
# -----------------------------
class RoomMessageLog:
    """roomId -> ordered list of :class:`MessageRecord`.

    Expired records are hidden by :meth:`list_active` but stay in memory
    until their room is deleted.
    """

    def __init__(self, rooms: Optional[Dict[str, List[MessageRecord]]] = None) -> None:
        self._rooms: Dict[str, List[MessageRecord]] = rooms if rooms is not None else {}

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def append(self, room_id: str, record: MessageRecord) -> None:
        log = self._rooms.get(room_id)
        if log is None:
            log = self._rooms[room_id] = []
            logger.info("Message log created for room %s", room_id)
        log.append(record)

    def list_active(self, room_id: str, now: Millis) -> List[MessageRecord]:
        return [m for m in self._rooms.get(room_id, ()) if is_active(m.expires_at, now)]

    def stored_count(self, room_id: str) -> int:
        """Number of records held for the room, expired ones included."""
        return len(self._rooms.get(room_id, ()))

    def delete_room(self, room_id: str) -> None:
        self._rooms.pop(room_id, None)
