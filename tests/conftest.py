"""Shared fixtures for fuel log tests."""

import itertools

import pytest

from fuellog import FuelEntry


@pytest.fixture
def make_entry():
    """Factory for FuelEntry with sequential ids (e1, e2, ...)."""
    counter = itertools.count(1)

    def _make(date, odometer, fuel_amount=0.0, cost=0.0, partial_fill=False, **kwargs):
        kwargs.setdefault("id", f"e{next(counter)}")
        return FuelEntry(
            date=date,
            odometer=odometer,
            fuel_amount=fuel_amount,
            cost=cost,
            partial_fill=partial_fill,
            **kwargs,
        )

    return _make
