#!/usr/bin/env python3
"""Tests for JSON and CSV import/export."""

import json

import pytest

from fuellog import (
    EntryStore,
    FuelEntry,
    InvalidInputError,
    export_csv,
    export_json,
    parse_csv_import,
    parse_import,
    parse_json_import,
    select_export_entries,
)
from fuellog.import_export import CSV_HEADERS

HEADER = (
    "id,date,vehicle,odometer,fuelAmount,fuelUnit,cost,currency,partialFill,"
    "fuelType,location,notes,createdAt,modifiedAt"
)


# =============================================================================
# Export tests
# =============================================================================


class TestExportCsv:
    """Tests for export_csv."""

    def test_header_only_when_empty(self):
        assert export_csv([]) == HEADER

    def test_header_columns(self):
        assert ",".join(CSV_HEADERS) == HEADER

    def test_row_values(self):
        entry = FuelEntry("a", "2025-01-01", 58210, 41.3, 72.8, partial_fill=True)
        lines = export_csv([entry]).split("\n")
        assert lines[1] == "a,2025-01-01,,58210,41.3,,72.8,,true,,,,,"

    def test_escapes_commas_quotes_and_newlines(self):
        entry = FuelEntry(
            "a",
            "2025-01-01",
            100,
            10,
            15,
            location="Main St, Springfield",
            notes='said "full"\nsecond line',
        )
        text = export_csv([entry])
        assert '"Main St, Springfield"' in text
        assert '"said ""full""\nsecond line"' in text


class TestExportJson:
    """Tests for export_json."""

    def test_array_of_camel_case_records(self):
        entry = FuelEntry("a", "2025-01-01", 100, 10, 15, vehicle="golf")
        data = json.loads(export_json([entry]))
        assert data == [
            {
                "id": "a",
                "date": "2025-01-01",
                "vehicle": "golf",
                "odometer": 100,
                "fuelAmount": 10,
                "cost": 15,
                "partialFill": False,
            }
        ]


class TestSelectExportEntries:
    """Tests for select_export_entries."""

    @pytest.fixture
    def store(self, make_entry):
        return EntryStore(
            [
                make_entry("2025-01-01", 1000, vehicle="golf"),
                make_entry("2025-02-01", 1500, vehicle="van"),
                make_entry("2025-03-01", 2000, vehicle="golf"),
            ]
        )

    def test_all(self, store):
        assert [e.id for e in select_export_entries(store)] == ["e3", "e2", "e1"]

    def test_vehicle_scope(self, store):
        result = select_export_entries(store, "vehicle", vehicle="golf")
        assert [e.id for e in result] == ["e3", "e1"]

    def test_date_range_scope(self, store):
        result = select_export_entries(
            store, "dateRange", start_date="2025-01-15", end_date="2025-03-01"
        )
        assert [e.id for e in result] == ["e3", "e2"]

    def test_scope_without_parameters_falls_back_to_all(self, store):
        assert len(select_export_entries(store, "vehicle")) == 3
        assert len(select_export_entries(store, "dateRange", start_date="2025-01-01")) == 3


# =============================================================================
# Import tests
# =============================================================================


class TestParseJsonImport:
    """Tests for parse_json_import."""

    def test_valid_records(self):
        text = json.dumps(
            [
                {"id": "a", "date": "2025-01-01", "odometer": 100, "fuelAmount": 10},
                {"id": "b", "date": "2025-01-05", "odometer": 400, "partialFill": True},
            ]
        )
        batch = parse_json_import(text)
        assert [e.id for e in batch.entries] == ["a", "b"]
        assert batch.entries[1].partial_fill is True
        assert batch.errors == []

    def test_invalid_records_rejected(self):
        text = json.dumps(
            [
                {"id": "a", "date": "2025-01-01", "odometer": 100},
                {"date": "2025-01-02", "odometer": 200},
                {"id": "c", "odometer": 300},
                {"id": "d", "date": "2025-01-04", "odometer": "400"},
                {"id": "e", "date": "2025-01-05", "odometer": 500, "cost": -3},
            ]
        )
        batch = parse_json_import(text)
        assert [e.id for e in batch.entries] == ["a"]
        assert len(batch.errors) == 4
        assert batch.errors[0].startswith("record 1")

    def test_rejects_non_iso_date(self):
        text = json.dumps(
            [
                {"id": "a", "date": "2025-01-01", "odometer": 100},
                {"id": "b", "date": "05/01/2025", "odometer": 200},
            ]
        )
        batch = parse_json_import(text)
        assert [e.id for e in batch.entries] == ["a"]
        assert batch.errors == ["record 1: Entry b: Not an ISO-8601 date: '05/01/2025'"]

    def test_rejects_infinite_odometer(self):
        batch = parse_json_import('[{"id": "a", "date": "2025-01-01", "odometer": Infinity}]')
        assert batch.entries == []
        assert "finite" in batch.errors[0]

    def test_non_array_gives_no_entries(self):
        batch = parse_json_import('{"id": "a"}')
        assert batch.entries == []
        assert len(batch.errors) == 1

    def test_invalid_json_raises(self):
        with pytest.raises(InvalidInputError, match="Invalid JSON"):
            parse_json_import("[{not json")


class TestParseCsvImport:
    """Tests for parse_csv_import."""

    def test_round_trip_from_export(self):
        entry = FuelEntry(
            "a",
            "2025-01-01",
            58210,
            41.3,
            72.8,
            partial_fill=True,
            vehicle="golf",
            notes="one, two",
            created_at="2025-01-01T10:00:00+00:00",
            modified_at="2025-01-01T10:00:00+00:00",
        )
        batch = parse_csv_import(export_csv([entry]))
        assert batch.entries == [entry]

    def test_generates_missing_id_and_timestamps(self):
        batch = parse_csv_import("date,odometer,fuelAmount,cost\n2025-01-01,100,10,15\n")
        entry = batch.entries[0]
        assert entry.id
        assert entry.created_at is not None
        assert entry.modified_at is not None

    def test_empty_numbers_become_zero(self):
        batch = parse_csv_import("id,date,odometer,fuelAmount,cost\na,2025-01-01,100,,abc\n")
        assert batch.entries[0].fuel_amount == 0
        assert batch.entries[0].cost == 0

    def test_rejects_bad_odometer(self):
        text = (
            "id,date,odometer\n"
            "a,2025-01-01,100\n"
            "b,2025-01-02,\n"
            "c,2025-01-03,lots\n"
            "d,2025-01-04,-5\n"
        )
        batch = parse_csv_import(text)
        assert [e.id for e in batch.entries] == ["a"]
        assert [err.split(":")[0] for err in batch.errors] == ["line 3", "line 4", "line 5"]

    def test_rejects_non_iso_dates(self):
        text = (
            "id,date,odometer,fuelAmount,cost\n"
            "a,05/01/2025,1000,40,60\n"
            "b,15/01/2025,1500,35,56\n"
            "c,2025-1-20,2000,30,45\n"
        )
        batch = parse_csv_import(text)
        assert batch.entries == []
        assert [err.split(":")[0] for err in batch.errors] == ["line 2", "line 3", "line 4"]

    def test_normalizes_dates(self):
        batch = parse_csv_import("id,date,odometer\na,20250105,100\n")
        assert batch.entries[0].date == "2025-01-05"

    def test_non_finite_numbers(self):
        text = (
            "id,date,odometer,fuelAmount,cost\n"
            "a,2025-01-01,inf,1,1\n"
            "b,2025-01-02,1e999,1,1\n"
            "c,2025-01-03,100,inf,-inf\n"
        )
        batch = parse_csv_import(text)
        assert [e.id for e in batch.entries] == ["c"]
        assert batch.entries[0].fuel_amount == 0
        assert batch.entries[0].cost == 0
        assert [err.split(":")[0] for err in batch.errors] == ["line 2", "line 3"]

    def test_rejects_missing_date(self):
        batch = parse_csv_import("id,date,odometer\na,,100\n")
        assert batch.entries == []
        assert "missing date" in batch.errors[0]

    def test_header_only(self):
        assert parse_csv_import(HEADER).entries == []

    def test_empty_text(self):
        assert parse_csv_import("").entries == []


class TestParseImport:
    """Tests for parse_import dispatch."""

    def test_unknown_format_raises(self):
        with pytest.raises(InvalidInputError):
            parse_import("", "xml")
