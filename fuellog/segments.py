"""Split a refuel history into full-to-full consumption segments."""

from dataclasses import dataclass
from typing import List, Sequence

from .fuel_entry import FuelEntry
from .ordering import require_canonical_order


@dataclass(frozen=True)
class Segment:
    """Fuel burned over the distance between two full fills."""

    fuel_consumed: float
    distance: float
    date: str  # date of the full fill that closed the segment

    @property
    def consumption_per_100(self) -> float:
        """Fuel used per 100 distance units."""
        return self.fuel_consumed / self.distance * 100


def compute_segments(entries: Sequence[FuelEntry]) -> List[Segment]:
    """
    Compute consumption segments for one vehicle's entries.

    Logic:
    - The first entry is only a baseline; its fuel is never counted
    - Fuel from every later entry accumulates until a full fill
    - A full fill closes a segment at (odometer - baseline odometer)
      and becomes the new baseline
    - If that distance is not positive, no segment is emitted and the
      accumulated fuel is dropped rather than carried forward

    Args:
        entries: Entries in canonical order, already filtered to a vehicle
    """
    require_canonical_order(entries)
    if len(entries) < 2:
        return []

    segments = []
    accumulated_fuel = 0.0
    baseline = entries[0]
    for entry in entries[1:]:
        accumulated_fuel += entry.fuel_amount
        if entry.partial_fill:
            continue

        distance = entry.odometer - baseline.odometer
        if distance > 0:
            segments.append(Segment(accumulated_fuel, distance, entry.date))
        accumulated_fuel = 0.0
        baseline = entry
    return segments
