"""
Tests for roster.store.RosterStore.

Covers the player/match mutations, persistence after every mutation,
bootstrap variants, and the corrupt-blob failure at load time.
"""
from __future__ import annotations

import json

import pytest

from config import STORAGE_KEY
from db.local_storage import get_item, set_item
from roster.errors import ValidationError, DuplicateError, NotFoundError, CorruptStoreError
from roster.store import RosterStore, serialize_roster, deserialize_roster
from utils.constants import DEFAULT_ROSTER


def stored_roster(db_path):
    blob = get_item(STORAGE_KEY, db_path)
    return None if blob is None else json.loads(blob)


# ---------- Lifecycle ----------


def test_empty_storage_bootstraps_default_roster(db_path):
    store = RosterStore.create(db_path, bootstrap="defaults")

    assert store.player_names() == sorted(DEFAULT_ROSTER)
    assert all(store.get_matches(name) == [] for name in DEFAULT_ROSTER)
    # The bootstrap result is persisted right away
    assert set(stored_roster(db_path)) == set(DEFAULT_ROSTER)


def test_empty_storage_bootstraps_empty_roster(db_path):
    store = RosterStore.create(db_path, bootstrap="empty")
    assert len(store) == 0
    assert stored_roster(db_path) == {}


def test_unknown_bootstrap_mode_rejected(db_path):
    with pytest.raises(ValueError):
        RosterStore(db_path, bootstrap="sometimes")


def test_reload_restores_persisted_roster(store, db_path):
    store.add_player("John")
    store.add_match("John", "2024-01-10", 20, 5, 3)
    before = store.snapshot()

    reopened = RosterStore.create(db_path, bootstrap="defaults")
    assert reopened.snapshot() == before


def test_teardown_drops_memory_but_keeps_storage(store, db_path):
    store.add_player("Ana")
    store.teardown()

    with pytest.raises(RuntimeError):
        store.player_names()
    assert "Ana" in stored_roster(db_path)

    store.load()
    assert store.player_names() == ["Ana"]


def test_save_writes_full_snapshot(store, db_path):
    store.add_player("Ana")
    set_item(STORAGE_KEY, "{}", db_path)

    store.save()
    assert stored_roster(db_path) == {"Ana": []}


@pytest.mark.parametrize(
    "blob",
    [
        "not json",
        "[]",
        '{"Ana": {}}',
        '{"": []}',
        '{" Ana ": []}',
        '{"Ana": [{"id": "a", "date": "2024-01-01"}]}',
        '{"Ana": [{"id": "a", "date": "nope", "points": 1, "rebounds": 1, "assists": 1}]}',
        '{"Ana": [{"id": "a", "date": "2024-01-01", "points": -1, "rebounds": 1, "assists": 1}]}',
        '{"Ana": [{"id": "a", "date": "2024-01-01", "points": "3", "rebounds": 1, "assists": 1}]}',
        '{"Ana": [{"id": "a", "date": "2024-01-01", "points": 1, "rebounds": 1, "assists": 1},'
        ' {"id": "a", "date": "2024-01-02", "points": 1, "rebounds": 1, "assists": 1}]}',
    ],
)
def test_malformed_blob_fails_at_load(db_path, blob):
    RosterStore.create(db_path, bootstrap="empty")
    set_item(STORAGE_KEY, blob, db_path)

    with pytest.raises(CorruptStoreError):
        RosterStore.create(db_path)


def test_serialize_round_trip(store):
    store.add_player("John")
    store.add_player("Ana")
    store.add_match("John", "2024-01-10", 20, 5, 3)
    store.add_match("John", "2024-01-05", 10, 2, 1)
    store.add_match("John", "2024-01-05", 8, 0, 4)
    roster = store.snapshot()

    decoded = deserialize_roster(serialize_roster(roster))
    assert decoded == roster
    assert list(decoded["John"]) == roster["John"]


# ---------- Players ----------


def test_add_player_trims_name(store, db_path):
    assert store.add_player("  Bo  ") == "Bo"
    assert store.player_names() == ["Bo"]
    assert "Bo" in stored_roster(db_path)


@pytest.mark.parametrize("name", ["", "   ", None])
def test_add_player_requires_name(store, name):
    with pytest.raises(ValidationError):
        store.add_player(name)
    assert len(store) == 0


def test_add_player_rejects_undecodable_name(store, db_path):
    # Undecodable argv bytes reach Python as lone surrogates
    with pytest.raises(ValidationError):
        store.add_player("\udcff")
    with pytest.raises(ValidationError):
        store.add_player("Ana\udc80")
    assert len(store) == 0
    assert stored_roster(db_path) == {}


def test_duplicate_player_rejected_and_history_kept(store):
    store.add_player("Ana")
    store.add_match("Ana", "2024-02-01", 12, 4, 6)

    with pytest.raises(DuplicateError):
        store.add_player("Ana")
    with pytest.raises(DuplicateError):
        store.add_player(" Ana ")

    assert store.player_names() == ["Ana"]
    assert len(store.get_matches("Ana")) == 1


def test_names_are_case_sensitive(store):
    store.add_player("Ana")
    store.add_player("ana")
    assert store.player_names() == ["Ana", "ana"]


def test_delete_player(store, db_path):
    store.add_player("John")
    store.add_match("John", "2024-01-10", 20, 5, 3)

    store.delete_player("John")
    assert "John" not in store
    assert stored_roster(db_path) == {}

    with pytest.raises((NotFoundError, ValidationError)):
        store.add_match("John", "2024-01-11", 1, 1, 1)


def test_delete_missing_player_fails_loudly(store):
    with pytest.raises(NotFoundError):
        store.delete_player("Ghost")


# ---------- Matches ----------


def test_add_match_keeps_list_sorted_by_date(store):
    store.add_player("John")
    store.add_match("John", "2024-01-10", 20, 5, 3)
    store.add_match("John", "2024-01-05", 10, 2, 1)

    matches = store.get_matches("John")
    assert [m["date"] for m in matches] == ["2024-01-05", "2024-01-10"]
    assert [m["points"] for m in matches] == [10, 20]
    assert [(m["rebounds"], m["assists"]) for m in matches] == [(2, 1), (5, 3)]


def test_same_day_matches_keep_insertion_order(store):
    store.add_player("John")
    first = store.add_match("John", "2024-01-05", 1)
    second = store.add_match("John", "2024-01-05", 2)
    store.add_match("John", "2024-01-01", 3)

    ids = [m["id"] for m in store.get_matches("John")]
    assert ids[1:] == [first["id"], second["id"]]


def test_add_match_coerces_counts(store):
    store.add_player("John")
    match = store.add_match("John", "2024-01-05", "abc", None, "7.5")

    assert (match["points"], match["rebounds"], match["assists"]) == (0, 0, 7)


def test_add_match_ids_are_unique(store):
    store.add_player("John")
    ids = {store.add_match("John", "2024-01-05", i)["id"] for i in range(25)}

    assert len(ids) == 25
    assert all(len(i) == 9 and i.isalnum() and i == i.lower() for i in ids)


@pytest.mark.parametrize("name", ["", None, "Ghost"])
def test_add_match_requires_known_player(store, name):
    store.add_player("John")
    with pytest.raises(ValidationError):
        store.add_match(name, "2024-01-05", 1, 1, 1)


@pytest.mark.parametrize("bad_date", ["", None, "2024-02-30", "soon"])
def test_add_match_requires_valid_date(store, bad_date):
    store.add_player("John")
    with pytest.raises(ValidationError):
        store.add_match("John", bad_date, 1, 1, 1)
    assert store.get_matches("John") == []


def test_update_match_replaces_fields_and_resorts(store, db_path):
    store.add_player("John")
    early = store.add_match("John", "2024-01-05", 10, 2, 1)
    store.add_match("John", "2024-01-10", 20, 5, 3)

    updated = store.update_match("John", early["id"], "2024-01-15", "30", "", 9)

    assert updated["id"] == early["id"]
    matches = store.get_matches("John")
    assert [m["date"] for m in matches] == ["2024-01-10", "2024-01-15"]
    assert matches[-1] == {
        "id": early["id"], "date": "2024-01-15", "points": 30, "rebounds": 0, "assists": 9,
    }
    assert stored_roster(db_path)["John"] == matches


def test_update_match_unknown_player_or_id(store):
    store.add_player("John")
    store.add_match("John", "2024-01-05", 10, 2, 1)

    with pytest.raises(NotFoundError):
        store.update_match("Ghost", "abc", "2024-01-05", 1, 1, 1)
    with pytest.raises(NotFoundError):
        store.update_match("John", "missing", "2024-01-05", 1, 1, 1)


def test_update_match_bad_date_changes_nothing(store):
    store.add_player("John")
    match = store.add_match("John", "2024-01-05", 10, 2, 1)

    with pytest.raises(ValidationError):
        store.update_match("John", match["id"], "", 99, 99, 99)
    assert store.get_matches("John") == [match]


def test_delete_match(store):
    store.add_player("John")
    keep = store.add_match("John", "2024-01-05", 10, 2, 1)
    drop = store.add_match("John", "2024-01-10", 20, 5, 3)

    assert store.delete_match("John", drop["id"]) is True
    assert store.get_matches("John") == [keep]


def test_delete_missing_match_is_noop(store):
    store.add_player("John")
    match = store.add_match("John", "2024-01-05", 10, 2, 1)

    assert store.delete_match("John", "missing") is False
    assert store.get_matches("John") == [match]


def test_get_match(store):
    store.add_player("John")
    match = store.add_match("John", "2024-01-05", 10, 2, 1)

    assert store.get_match("John", match["id"]) == match
    with pytest.raises(NotFoundError):
        store.get_match("John", "missing")


def test_returned_lists_are_copies(store):
    store.add_player("John")
    store.add_match("John", "2024-01-05", 10, 2, 1)

    store.get_matches("John")[0]["points"] = 99
    store.snapshot()["John"].clear()
    assert store.get_matches("John")[0]["points"] == 10


# ---------- Resets & defaults ----------


def test_reset_player_stats_keeps_player(store):
    store.add_player("John")
    store.add_match("John", "2024-01-05", 10, 2, 1)

    store.reset_player_stats("John")
    assert store.player_names() == ["John"]
    assert store.get_matches("John") == []

    with pytest.raises(NotFoundError):
        store.reset_player_stats("Ghost")


def test_reset_all_clears_roster_and_storage(db_path):
    store = RosterStore.create(db_path, bootstrap="defaults")
    store.add_player("John")

    store.reset_all()
    assert len(store) == 0
    assert stored_roster(db_path) == {}


def test_reset_all_survives_reopen_with_default_bootstrap(db_path):
    store = RosterStore.create(db_path, bootstrap="defaults")
    store.add_player("John")
    store.reset_all()
    store.teardown()

    reopened = RosterStore.create(db_path, bootstrap="defaults")
    assert len(reopened) == 0
    assert reopened.player_names() == []


def test_load_default_roster_replaces_everything(store):
    store.add_player("John")
    store.add_player("YAYA")
    store.add_match("YAYA", "2024-01-05", 10, 2, 1)

    store.load_default_roster()
    assert store.player_names() == sorted(DEFAULT_ROSTER)
    assert store.get_matches("YAYA") == []


def test_merge_default_roster_keeps_existing_histories(store):
    store.add_player("John")
    store.add_player("YAYA")
    match = store.add_match("YAYA", "2024-01-05", 10, 2, 1)

    added = store.merge_default_roster()
    assert "YAYA" not in added
    assert len(added) == len(DEFAULT_ROSTER) - 1
    assert store.get_matches("YAYA") == [match]
    assert "John" in store
    assert set(store.player_names()) == set(DEFAULT_ROSTER) | {"John"}

    assert store.merge_default_roster() == []


def test_failed_write_leaves_roster_unchanged(store, monkeypatch):
    store.add_player("John")

    def boom(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("roster.store.set_item", boom)
    with pytest.raises(OSError):
        store.add_match("John", "2024-01-05", 10, 2, 1)
    assert store.get_matches("John") == []
