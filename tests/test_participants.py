from __future__ import annotations

import pytest

from relay_server.errors import ValidationError
from relay_server.participants import ParticipantEntry, RoomKeyDirectory, normalize_entry


def test_upsert_inserts_and_trims_alias():
    d = RoomKeyDirectory()
    d.upsert("r", "  alice ", "k1")
    assert d.list("r") == [ParticipantEntry("alice", "k1")]


def test_upsert_replaces_key_in_place():
    d = RoomKeyDirectory()
    d.upsert("r", "alice", "k1")
    d.upsert("r", "bob", None)
    d.upsert("r", "alice", "k2")
    assert d.list("r") == [ParticipantEntry("alice", "k2"), ParticipantEntry("bob", "")]


def test_upsert_with_none_key_keeps_existing():
    d = RoomKeyDirectory()
    d.upsert("r", "alice", "k1")
    d.upsert("r", "alice", None)
    assert d.list("r") == [ParticipantEntry("alice", "k1")]


def test_upsert_with_empty_key_clears_it():
    d = RoomKeyDirectory()
    d.upsert("r", "alice", "k1")
    d.upsert("r", "alice", "")
    assert d.list("r") == [ParticipantEntry("alice", "")]


@pytest.mark.parametrize("alias", [None, "", "   ", 5, ["alice"]])
def test_upsert_rejects_bad_alias(alias):
    d = RoomKeyDirectory()
    with pytest.raises(ValidationError):
        d.upsert("r", alias, "k")
    assert "r" not in d


def test_legacy_strings_are_upgraded_on_write():
    d = RoomKeyDirectory({"r": ["alice", "bob"]})
    d.upsert("r", "bob", "kb")
    assert d.list("r") == ["alice", ParticipantEntry("bob", "kb")]


def test_normalize_entry():
    assert normalize_entry("carol") == ParticipantEntry("carol", "")
    entry = ParticipantEntry("dave", "kd")
    assert normalize_entry(entry) is entry


def test_delete_room():
    d = RoomKeyDirectory()
    d.upsert("r", "alice")
    d.delete_room("r")
    d.delete_room("r")
    assert d.list("r") == []
