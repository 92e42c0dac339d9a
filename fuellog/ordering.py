"""Canonical ordering and vehicle selection for fuel entries."""

from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidInputError
from .fuel_entry import FuelEntry


def _order_key(entry: FuelEntry) -> Tuple[str, float]:
    return (entry.date, entry.odometer)


def canonical_order(entries: Iterable[FuelEntry]) -> List[FuelEntry]:
    """
    Sort entries by date, then odometer, both ascending.

    The sort is stable, so entries with equal keys keep their input order.
    """
    return sorted(entries, key=_order_key)


def is_canonical_order(entries: Sequence[FuelEntry]) -> bool:
    """Check that entries are already sorted by (date, odometer)."""
    return all(
        _order_key(prev) <= _order_key(cur) for prev, cur in zip(entries, entries[1:])
    )


def require_canonical_order(entries: Sequence[FuelEntry]) -> None:
    """Raise InvalidInputError if entries are not in canonical order."""
    for index, (prev, cur) in enumerate(zip(entries, entries[1:]), start=1):
        if _order_key(prev) > _order_key(cur):
            raise InvalidInputError(
                f"Entries are not in canonical order at position {index}: "
                f"{cur.date} @ {cur.odometer:g} follows {prev.date} @ {prev.odometer:g}"
            )


def select_vehicle(
    entries: Iterable[FuelEntry], vehicle: Optional[str]
) -> List[FuelEntry]:
    """Keep entries for one vehicle label. None selects every entry."""
    if vehicle is None:
        return list(entries)
    return [e for e in entries if e.vehicle == vehicle]


def vehicle_labels(entries: Iterable[FuelEntry]) -> List[str]:
    """Sorted distinct vehicle labels, ignoring unlabelled entries."""
    return sorted({e.vehicle for e in entries if e.vehicle})
