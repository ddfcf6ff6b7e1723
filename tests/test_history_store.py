"""Tests for app.database.history_store — CRUD, capacity, search, persistence.

Each test gets its own SQLite file under tmp_path.
"""

import json
import logging
import sqlite3

import pytest

from app.constants import HISTORY_SETTING_KEY, MAX_HISTORY_ENTRIES
from app.core.driver_calculator import compute_driver_plan
from app.core.serializers import history_entry_to_dict
from app.core.units import convert
from app.database.db_manager import DatabaseManager
from app.database.history_store import HistoryStore
from app.models.calculation import (
    CustomerInfo,
    DriverConfig,
    LengthUnit,
    Voltage,
)


# ── Fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(tmp_path / "test.db")
    manager.initialize_database()
    yield manager
    manager.close()


@pytest.fixture
def store(db):
    s = HistoryStore(db)
    s.load()
    return s


def _save(store: HistoryStore, name: str = "Alice", area: str = "Kitchen", meters: str = "2"):
    length = convert(LengthUnit.METERS, meters)
    result = compute_driver_plan(float(meters), 14.4, 20, 100, Voltage.V24)
    return store.add_entry(CustomerInfo(name, area), length, DriverConfig(), result)


def _reload(db: DatabaseManager) -> HistoryStore:
    fresh = HistoryStore(db)
    fresh.load()
    return fresh


# ── Load ─────────────────────────────────────────────────────────────

class TestLoad:
    def test_missing_record_is_empty(self, store):
        assert store.entries == []

    def test_corrupt_record_is_empty(self, db):
        db.set_setting(HISTORY_SETTING_KEY, "{not json")
        assert _reload(db).entries == []

    def test_wrong_shape_is_empty(self, db):
        db.set_setting(HISTORY_SETTING_KEY, json.dumps({"entries": 3}))
        assert _reload(db).entries == []

    def test_entry_without_result_is_discarded(self, db):
        db.set_setting(HISTORY_SETTING_KEY, json.dumps([{"id": "x"}]))
        assert _reload(db).entries == []

    def test_roundtrip_through_database(self, db, store):
        entry = _save(store, "Bob", "Garage", "3.5")
        loaded = _reload(db).entries
        assert len(loaded) == 1
        assert loaded[0] == entry


# ── Create ───────────────────────────────────────────────────────────

class TestAddEntry:
    def test_add_returns_entry(self, store):
        entry = _save(store)
        assert entry.id
        assert entry.timestamp
        assert entry.last_modified is None
        assert entry.customer_name == "Alice"

    def test_no_result_is_noop(self, store):
        entry = store.add_entry(CustomerInfo(), convert(LengthUnit.METERS, ""), DriverConfig(), None)
        assert entry is None
        assert len(store) == 0

    def test_newest_first(self, store):
        _save(store, "First")
        _save(store, "Second")
        assert [e.customer_name for e in store.entries] == ["Second", "First"]

    def test_unique_ids(self, store):
        ids = {_save(store, f"C{i}").id for i in range(10)}
        assert len(ids) == 10

    def test_capacity_keeps_most_recent(self, store):
        for i in range(25):
            _save(store, f"Customer {i}")
        names = [e.customer_name for e in store.entries]
        assert len(names) == MAX_HISTORY_ENTRIES
        assert names == [f"Customer {i}" for i in range(24, 4, -1)]

    def test_persisted_immediately(self, db, store):
        _save(store)
        raw = db.get_setting(HISTORY_SETTING_KEY)
        assert len(json.loads(raw)) == 1


# ── Update ───────────────────────────────────────────────────────────

class TestUpdateEntry:
    def test_update_preserves_identity(self, store):
        original = _save(store, "Alice", "Kitchen", "2")
        new_result = compute_driver_plan(5, 14.4, 20, 100)
        updated = store.update_entry(
            original.id, CustomerInfo("Alice B", "Hall"),
            convert(LengthUnit.METERS, "5"), DriverConfig(), new_result,
        )
        assert updated.id == original.id
        assert updated.timestamp == original.timestamp
        assert updated.last_modified is not None
        assert updated.customer_name == "Alice B"
        assert updated.result.total_power == pytest.approx(72.0)

    def test_update_keeps_order(self, store):
        first = _save(store, "First")
        _save(store, "Second")
        store.update_entry(
            first.id, CustomerInfo("First edited", ""),
            first.length, first.driver, first.result,
        )
        assert [e.customer_name for e in store.entries] == ["Second", "First edited"]

    def test_update_persisted(self, db, store):
        entry = _save(store)
        store.update_entry(entry.id, CustomerInfo("Zed", ""), entry.length, entry.driver, entry.result)
        assert _reload(db).entries[0].customer_name == "Zed"

    def test_update_without_result_is_noop(self, store):
        entry = _save(store)
        assert store.update_entry(entry.id, CustomerInfo("X", ""), entry.length, entry.driver, None) is None
        assert store.entries[0].customer_name == "Alice"

    def test_update_unknown_id(self, store):
        entry = _save(store)
        assert store.update_entry("missing", entry.customer, entry.length, entry.driver, entry.result) is None
        assert store.entries == [entry]


# ── Delete / Clear ───────────────────────────────────────────────────

class TestDeleteAndClear:
    def test_delete(self, db, store):
        keep = _save(store, "Keep")
        drop = _save(store, "Drop")
        assert store.delete_entry(drop.id) is True
        assert store.entries == [keep]
        assert _reload(db).entries == [keep]

    def test_delete_unknown_is_noop(self, store):
        entry = _save(store)
        assert store.delete_entry("nope") is False
        assert store.entries == [entry]

    def test_clear_removes_record(self, db, store):
        _save(store)
        _save(store)
        store.clear()
        assert store.entries == []
        assert db.get_setting(HISTORY_SETTING_KEY) is None
        assert _reload(db).entries == []


# ── Search ───────────────────────────────────────────────────────────

class TestSearch:
    @pytest.fixture
    def filled(self, store):
        _save(store, "Alice Smith", "Kitchen")
        _save(store, "Bob", "Living Room")
        _save(store, "Carol", "kitchen island")
        return store

    def test_empty_term_returns_all(self, filled):
        assert filled.search("") == filled.entries
        assert filled.search(None) == filled.entries

    def test_matches_area_case_insensitive(self, filled):
        names = [e.customer_name for e in filled.search("KITCHEN")]
        assert names == ["Carol", "Alice Smith"]

    def test_matches_name(self, filled):
        assert [e.customer_name for e in filled.search("bob")] == ["Bob"]

    def test_no_match(self, filled):
        assert filled.search("garage") == []

    def test_term_matched_as_typed(self, filled):
        assert filled.search(" kit") == []
        assert [e.customer_name for e in filled.search("n i")] == ["Carol"]
        assert filled.search("   ") == []

    def test_search_does_not_mutate(self, filled):
        before = filled.entries
        filled.search("bob")
        assert filled.entries == before

    def test_get_entry(self, filled):
        entry = filled.entries[1]
        assert filled.get_entry(entry.id) == entry
        assert filled.get_entry("missing") is None


# ── Shared database file ─────────────────────────────────────────────

class TestSharedDatabase:
    """Two app instances on one database file, each with its own store."""

    @pytest.fixture
    def pair(self, tmp_path):
        path = tmp_path / "shared.db"
        managers = [DatabaseManager(path), DatabaseManager(path)]
        stores = []
        for manager in managers:
            manager.initialize_database()
            store = HistoryStore(manager)
            store.load()
            stores.append(store)
        yield stores
        for manager in managers:
            manager.close()

    def test_saves_from_both_instances_survive(self, pair, tmp_path):
        a, b = pair
        _save(a, "From A")
        _save(b, "From B")
        expected = ["From B", "From A"]
        assert [e.customer_name for e in b.entries] == expected
        with DatabaseManager(tmp_path / "shared.db") as fresh:
            assert [e.customer_name for e in _reload(fresh).entries] == expected

    def test_update_sees_other_instance_entries(self, pair):
        a, b = pair
        from_a = _save(a, "From A")
        _save(b, "From B")
        updated = a.update_entry(
            from_a.id, CustomerInfo("A edited", ""),
            from_a.length, from_a.driver, from_a.result,
        )
        assert updated is not None
        assert [e.customer_name for e in a.entries] == ["From B", "A edited"]

    def test_delete_from_other_instance(self, pair):
        a, b = pair
        from_a = _save(a, "From A")
        assert b.delete_entry(from_a.id) is True
        assert a.load() == []


# ── Malformed records ────────────────────────────────────────────────

class TestMalformedEntries:
    def test_bad_entry_skipped_good_entries_kept(self, db, store):
        for i in range(5):
            _save(store, f"Good {i}")
        data = json.loads(db.get_setting(HISTORY_SETTING_KEY))
        data.append({"id": "legacy"})
        data.insert(2, "not an entry")
        db.set_setting(HISTORY_SETTING_KEY, json.dumps(data))

        fresh = _reload(db)
        assert len(fresh) == 5

        _save(fresh, "New")
        persisted = json.loads(db.get_setting(HISTORY_SETTING_KEY))
        assert len(persisted) == 6
        assert persisted[0]["customer_name"] == "New"

    def test_bad_entry_logged(self, db, store, caplog):
        good = history_entry_to_dict(_save(store))
        db.set_setting(HISTORY_SETTING_KEY, json.dumps([good, {"id": "legacy"}]))
        with caplog.at_level(logging.WARNING, logger="app.database.history_store"):
            assert len(_reload(db)) == 1
        assert "Skipping unreadable history entry" in caplog.text


# ── Database failures ────────────────────────────────────────────────

def _fail(*args, **kwargs):
    raise sqlite3.OperationalError("disk I/O error")


class TestDatabaseFailures:
    def test_read_failure_loads_empty(self, db, monkeypatch, caplog):
        monkeypatch.setattr(db, "get_setting", _fail)
        with caplog.at_level(logging.ERROR, logger="app.database.history_store"):
            assert HistoryStore(db).load() == []
        assert "Failed to read history" in caplog.text

    def test_write_failure_keeps_entry_in_memory(self, db, store, monkeypatch, caplog):
        monkeypatch.setattr(db, "set_setting", _fail)
        with caplog.at_level(logging.ERROR, logger="app.database.history_store"):
            entry = _save(store)
        assert entry is not None
        assert store.entries == [entry]
        assert "Failed to save history" in caplog.text

        monkeypatch.undo()
        assert _reload(db).entries == []

    def test_update_and_delete_survive_write_failure(self, db, store, monkeypatch):
        entry = _save(store)
        monkeypatch.setattr(db, "set_setting", _fail)
        updated = store.update_entry(
            entry.id, CustomerInfo("Offline", ""), entry.length, entry.driver, entry.result,
        )
        assert updated.customer_name == "Offline"
        assert store.delete_entry(entry.id) is True
        assert store.entries == []

    def test_clear_failure_not_raised(self, db, store, monkeypatch, caplog):
        _save(store)
        monkeypatch.setattr(db, "delete_setting", _fail)
        with caplog.at_level(logging.ERROR, logger="app.database.history_store"):
            store.clear()
        assert store.entries == []
        assert "Failed to remove history record" in caplog.text


# ── Returned entries are copies ──────────────────────────────────────

class TestEntryCopies:
    def test_changing_returned_entry_does_not_change_store(self, store):
        entry = _save(store, "Alice")
        fetched = store.get_entry(entry.id)
        fetched.customer_name = "Mallory"
        fetched.length.m = "99"
        store.entries[0].driver.power_per_meter = "60"

        stored = store.get_entry(entry.id)
        assert stored.customer_name == "Alice"
        assert stored.length.m == "2"
        assert stored.driver.power_per_meter == "14.4"
