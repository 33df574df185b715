"""Per-room directory of participant aliases and their public keys."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class ParticipantEntry:
    """An alias and the (opaque) public signing key it announced."""
    alias: str
    public_key: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"alias": self.alias, "publicKey": self.public_key}


# Older rooms stored bare alias strings instead of entries.
StoredParticipant = Union[ParticipantEntry, str]


def normalize_entry(item: StoredParticipant) -> ParticipantEntry:
    if isinstance(item, ParticipantEntry):
        return item
    return ParticipantEntry(alias=str(item), public_key="")


def _alias_of(item: StoredParticipant) -> str:
    return item.alias if isinstance(item, ParticipantEntry) else str(item)


class RoomKeyDirectory:
    """roomId -> participants, unique by alias within a room."""

    def __init__(self, rooms: Optional[Dict[str, List[StoredParticipant]]] = None) -> None:
        self._rooms: Dict[str, List[StoredParticipant]] = rooms if rooms is not None else {}

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def upsert(self, room_id: str, alias: Any, public_key: Any = None) -> None:
        """Insert ``alias`` or update its key.

        ``public_key=None`` leaves an existing key untouched rather than
        clearing it.
        """
        if not isinstance(alias, str) or not alias.strip():
            raise ValidationError("roomId and alias required")
        alias = alias.strip()
        key = str(public_key) if public_key is not None else None

        entries = self._rooms.get(room_id)
        if entries is None:
            entries = self._rooms[room_id] = []
            logger.info("Key directory created for room %s", room_id)

        for i, item in enumerate(entries):
            if _alias_of(item) != alias:
                continue
            if isinstance(item, ParticipantEntry):
                if key is not None:
                    item.public_key = key
            else:
                entries[i] = ParticipantEntry(alias=alias, public_key=key or "")
            return

        entries.append(ParticipantEntry(alias=alias, public_key=key or ""))

    def list(self, room_id: str) -> List[StoredParticipant]:
        return list(self._rooms.get(room_id, ()))

    def delete_room(self, room_id: str) -> None:
        self._rooms.pop(room_id, None)
