"""Helper functions shared by the statistics and series calculations."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

from dateutil.parser import isoparse, isoparser

from .errors import InvalidInputError

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class MetricSummary:
    """Average, extremes and most recent value of a per-entry metric."""

    avg: float
    min: float
    max: float
    last: float


def parse_date(value: str) -> datetime:
    """
    Parse an ISO-8601 date or timestamp.

    Naive values are treated as UTC so date-only and zoned
    timestamps can be compared with each other.
    """
    try:
        parsed = isoparse(value)
    except ValueError:
        raise InvalidInputError(f"Not an ISO-8601 date: {value!r}") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_date(value: str) -> str:
    """
    Rewrite an ISO-8601 date or timestamp in canonical form.

    Date-only values become YYYY-MM-DD. Zoned timestamps are converted
    to UTC so that string order matches time order.
    """
    try:
        return isoparser().parse_isodate(value).isoformat()
    except ValueError:
        pass
    try:
        parsed = isoparse(value)
    except ValueError:
        raise InvalidInputError(f"Not an ISO-8601 date: {value!r}") from None
    if parsed.tzinfo is None:
        return parsed.isoformat()
    return parsed.astimezone(timezone.utc).isoformat()


def days_between(start: str, end: str) -> float:
    """Fractional days from start to end (negative if end is earlier)."""
    delta = parse_date(end) - parse_date(start)
    return delta.total_seconds() / SECONDS_PER_DAY


def ratio(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """numerator / denominator, or None when either is missing or denominator is 0."""
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator


def summarize(values: Sequence[float]) -> Optional[MetricSummary]:
    """Build a MetricSummary from values in chronological order."""
    if not values:
        return None
    return MetricSummary(
        avg=sum(values) / len(values),
        min=min(values),
        max=max(values),
        last=values[-1],
    )
