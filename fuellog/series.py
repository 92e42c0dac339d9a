"""Chart time series derived from a vehicle's refuel history."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from .calculations import days_between
from .errors import InvalidInputError
from .fuel_entry import FuelEntry
from .ordering import require_canonical_order
from .segments import compute_segments

MIN_SERIES_POINTS = 2


class SeriesName(Enum):
    """Available chart series."""

    PRICE_PER_UNIT = "price-per-unit"
    CONSUMPTION_PER_100 = "consumption-per-100"
    FUEL_COST = "fuel-cost"
    FUEL_PER_FILLUP = "fuel-per-fillup"
    DISTANCE_BETWEEN_FILLUPS = "distance-between-fillups"
    DAYS_BETWEEN_FILLUPS = "days-between-fillups"
    DISTANCE_OVER_TIME = "distance-over-time"


@dataclass(frozen=True)
class SeriesPoint:
    date: str
    value: float


def _price_per_unit(entries: Sequence[FuelEntry]) -> List[SeriesPoint]:
    return [
        SeriesPoint(e.date, e.price_per_unit)
        for e in entries
        if e.price_per_unit is not None
    ]


def _consumption_per_100(entries: Sequence[FuelEntry]) -> List[SeriesPoint]:
    return [
        SeriesPoint(s.date, s.consumption_per_100) for s in compute_segments(entries)
    ]


def _fuel_cost(entries: Sequence[FuelEntry]) -> List[SeriesPoint]:
    return [SeriesPoint(e.date, e.cost) for e in entries]


def _fuel_per_fillup(entries: Sequence[FuelEntry]) -> List[SeriesPoint]:
    return [SeriesPoint(e.date, e.fuel_amount) for e in entries]


def _distance_between_fillups(entries: Sequence[FuelEntry]) -> List[SeriesPoint]:
    points = []
    for prev, cur in zip(entries, entries[1:]):
        delta = cur.odometer - prev.odometer
        if delta > 0:
            points.append(SeriesPoint(cur.date, delta))
    return points


def _days_between_fillups(entries: Sequence[FuelEntry]) -> List[SeriesPoint]:
    # Not filtered: anomalous data may give zero or negative gaps
    return [
        SeriesPoint(cur.date, round(days_between(prev.date, cur.date), 1))
        for prev, cur in zip(entries, entries[1:])
    ]


def _distance_over_time(entries: Sequence[FuelEntry]) -> List[SeriesPoint]:
    return [SeriesPoint(e.date, e.odometer) for e in entries]


_BUILDERS = {
    SeriesName.PRICE_PER_UNIT: _price_per_unit,
    SeriesName.CONSUMPTION_PER_100: _consumption_per_100,
    SeriesName.FUEL_COST: _fuel_cost,
    SeriesName.FUEL_PER_FILLUP: _fuel_per_fillup,
    SeriesName.DISTANCE_BETWEEN_FILLUPS: _distance_between_fillups,
    SeriesName.DAYS_BETWEEN_FILLUPS: _days_between_fillups,
    SeriesName.DISTANCE_OVER_TIME: _distance_over_time,
}


def parse_series_name(name: Union[str, SeriesName]) -> SeriesName:
    """Resolve a series name, raising InvalidInputError for unknown names."""
    if isinstance(name, SeriesName):
        return name
    try:
        return SeriesName(name)
    except ValueError:
        known = ", ".join(s.value for s in SeriesName)
        raise InvalidInputError(
            f"Unknown series '{name}' (expected one of: {known})"
        ) from None


def compute_series(
    name: Union[str, SeriesName], entries: Sequence[FuelEntry]
) -> Optional[List[SeriesPoint]]:
    """
    Build one chart series from entries in canonical order.

    Returns None when the series has fewer than two points, since a
    single point cannot be charted or summarized.
    """
    series_name = parse_series_name(name)
    require_canonical_order(entries)
    points = _BUILDERS[series_name](entries)
    if len(points) < MIN_SERIES_POINTS:
        return None
    return points


def compute_all_series(
    entries: Sequence[FuelEntry],
) -> Dict[SeriesName, Optional[List[SeriesPoint]]]:
    """Build every series for the same set of entries."""
    return {name: compute_series(name, entries) for name in SeriesName}
