#!/usr/bin/env python3
"""Tests for the in-memory entry store."""

import pytest

from fuellog import EntryNotFoundError, EntryStore


@pytest.fixture
def store(make_entry):
    return EntryStore(
        [
            make_entry("2025-01-01", 1000, 40, 60, vehicle="golf"),
            make_entry("2025-01-15", 1500, 35, 56, vehicle="van"),
            make_entry("2025-02-01T18:30:00", 2000, 30, 45, vehicle="golf"),
        ]
    )


class TestEntryStoreReads:
    """Tests for EntryStore lookups."""

    def test_count(self, store):
        assert store.count == 3
        assert len(store) == 3

    def test_get_entry(self, store):
        assert store.get_entry("e2").odometer == 1500

    def test_get_missing_entry_raises(self, store):
        with pytest.raises(EntryNotFoundError) as exc:
            store.get_entry("nope")
        assert exc.value.entry_id == "nope"

    def test_find_missing_entry_is_none(self, store):
        assert store.find_entry("nope") is None

    def test_has_entry(self, store):
        assert store.has_entry("e1")
        assert "e1" in store
        assert not store.has_entry("nope")

    def test_all_entries_newest_first(self, store):
        assert [e.id for e in store.all_entries()] == ["e3", "e2", "e1"]

    def test_entries_for_vehicle(self, store):
        assert [e.id for e in store.entries_for_vehicle("golf")] == ["e3", "e1"]

    def test_entries_in_date_range_inclusive(self, store):
        """A date-only end bound includes timestamps on that day."""
        result = store.entries_in_date_range("2025-01-15", "2025-02-01")
        assert [e.id for e in result] == ["e3", "e2"]

    def test_entries_in_date_range_excludes_outside(self, store):
        result = store.entries_in_date_range("2025-01-02", "2025-01-31")
        assert [e.id for e in result] == ["e2"]


class TestEntryStoreWrites:
    """Tests for EntryStore mutations."""

    def test_add_entry_assigns_id_and_timestamps(self):
        store = EntryStore()
        entry = store.add_entry(date="2025-01-01", odometer=100, fuel_amount=10, cost=15)
        assert entry.id
        assert entry.created_at is not None
        assert entry.created_at == entry.modified_at
        assert store.get_entry(entry.id) == entry

    def test_add_entry_ids_unique(self):
        store = EntryStore()
        first = store.add_entry(date="2025-01-01", odometer=100, fuel_amount=10, cost=15)
        second = store.add_entry(date="2025-01-01", odometer=100, fuel_amount=10, cost=15)
        assert first.id != second.id
        assert store.count == 2

    def test_update_entry_merges_changes(self, store):
        before = store.get_entry("e1")
        updated = store.update_entry("e1", cost=65.0, notes="corrected")
        assert updated.cost == 65.0
        assert updated.notes == "corrected"
        assert updated.odometer == before.odometer
        assert updated.modified_at is not None
        assert store.get_entry("e1") == updated

    def test_update_entry_keeps_id(self, store):
        updated = store.update_entry("e1", id="other")
        assert updated.id == "e1"
        assert not store.has_entry("other")

    def test_update_missing_entry_raises(self, store):
        with pytest.raises(EntryNotFoundError):
            store.update_entry("nope", cost=1)

    def test_delete_entry(self, store):
        store.delete_entry("e2")
        assert not store.has_entry("e2")
        assert store.count == 2

    def test_delete_missing_entry_raises(self, store):
        with pytest.raises(EntryNotFoundError):
            store.delete_entry("nope")

    def test_delete_entries(self, store):
        store.delete_entries(["e1", "e3"])
        assert [e.id for e in store.all_entries()] == ["e2"]

    def test_delete_entries_all_or_nothing(self, store):
        with pytest.raises(EntryNotFoundError):
            store.delete_entries(["e1", "nope"])
        assert store.count == 3

    def test_put_many_inserts_and_replaces(self, store, make_entry):
        replacement = make_entry("2025-01-01", 1010, 41, 61, id="e1")
        new = make_entry("2025-03-01", 2500, 30, 45, id="e9")
        store.put_many([replacement, new])
        assert store.get_entry("e1") == replacement
        assert store.get_entry("e9") == new
        assert store.count == 4
