"""Aggregate statistics over a vehicle's refuel history."""

from dataclasses import dataclass
from typing import Optional, Sequence

from .calculations import MetricSummary, days_between, ratio, summarize
from .fuel_entry import FuelEntry
from .ordering import require_canonical_order
from .segments import compute_segments


@dataclass(frozen=True)
class FuelStats:
    """
    Summary metrics for a set of entries.

    Any metric that cannot be computed (no segments, zero denominator)
    is None, never 0.
    """

    entry_count: int
    segment_count: int
    first_date: str
    last_date: str
    total_cost: float
    total_fuel: float
    total_distance: float
    total_days: float
    consumption: Optional[MetricSummary] = None
    price_per_unit: Optional[MetricSummary] = None
    cost_per_distance: Optional[float] = None
    cost_per_fillup: Optional[float] = None
    cost_per_day: Optional[float] = None
    distance_per_day: Optional[float] = None
    fuel_per_fillup: Optional[float] = None
    days_per_fillup: Optional[float] = None
    distance_per_fillup: Optional[float] = None
    fuel_per_day: Optional[float] = None
    distance_per_cost: Optional[float] = None


def compute_statistics(entries: Sequence[FuelEntry]) -> Optional[FuelStats]:
    """
    Compute summary statistics for entries in canonical order.

    Returns None for an empty set. Total distance is measured from the
    first to the last odometer reading, so it can differ from the sum of
    segment distances when anomalous intervals were dropped.
    """
    require_canonical_order(entries)
    if not entries:
        return None

    first, last = entries[0], entries[-1]
    count = len(entries)
    intervals = count - 1 if count > 1 else None

    total_cost = sum(e.cost for e in entries)
    total_fuel = sum(e.fuel_amount for e in entries)
    total_distance = last.odometer - first.odometer
    # Floor at one day so same-day histories still give per-day rates
    total_days = max(1.0, days_between(first.date, last.date))

    segments = compute_segments(entries)
    prices = [e.price_per_unit for e in entries if e.price_per_unit is not None]

    return FuelStats(
        entry_count=count,
        segment_count=len(segments),
        first_date=first.date,
        last_date=last.date,
        total_cost=total_cost,
        total_fuel=total_fuel,
        total_distance=total_distance,
        total_days=total_days,
        consumption=summarize([s.consumption_per_100 for s in segments]),
        price_per_unit=summarize(prices),
        cost_per_distance=ratio(total_cost, total_distance),
        cost_per_fillup=ratio(total_cost, count),
        cost_per_day=ratio(total_cost, total_days),
        distance_per_day=ratio(total_distance, total_days),
        fuel_per_fillup=ratio(total_fuel, count),
        days_per_fillup=ratio(total_days, intervals),
        distance_per_fillup=ratio(total_distance, intervals),
        fuel_per_day=ratio(total_fuel, total_days),
        distance_per_cost=ratio(total_distance, total_cost),
    )
