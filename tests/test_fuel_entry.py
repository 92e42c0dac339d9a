#!/usr/bin/env python3
"""Tests for FuelEntry dataclass."""

import dataclasses

import pytest

from fuellog import FuelEntry


class TestFuelEntry:
    """Tests for FuelEntry dataclass."""

    def test_required_attributes(self):
        entry = FuelEntry("abc", "2025-01-15", 50000, 40.5, 62.10)
        assert entry.id == "abc"
        assert entry.date == "2025-01-15"
        assert entry.odometer == 50000
        assert entry.fuel_amount == 40.5
        assert entry.cost == 62.10

    def test_optional_attributes_default(self):
        """Fill type defaults to full, descriptive fields to None."""
        entry = FuelEntry("abc", "2025-01-15", 50000, 40.5, 62.10)
        assert entry.partial_fill is False
        assert entry.is_full_fill
        assert entry.vehicle is None
        assert entry.fuel_type is None
        assert entry.location is None
        assert entry.notes is None
        assert entry.created_at is None

    def test_is_immutable(self):
        entry = FuelEntry("abc", "2025-01-15", 50000, 40.5, 62.10)
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.odometer = 1

    def test_price_per_unit(self):
        entry = FuelEntry("abc", "2025-01-15", 50000, 40, 60)
        assert entry.price_per_unit == 1.5

    def test_price_per_unit_none_without_fuel(self):
        entry = FuelEntry("abc", "2025-01-15", 50000, 0, 10)
        assert entry.price_per_unit is None
