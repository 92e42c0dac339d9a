"""
Fuel economy tracking.

This package turns a log of refueling events into consumption,
cost and time-series statistics:
- FuelEntry: A single refuel record
- canonical_order / select_vehicle: Ordering and vehicle filtering
- compute_segments: Full-to-full consumption segments
- compute_statistics: Aggregate cost, fuel and distance metrics
- compute_series: Chart series of (date, value) points
- reconcile: Merge imported entries into a store by id
- EntryStore / FuelLog: Record store and the log aggregate
"""

from .errors import FuelLogError, InvalidInputError, EntryNotFoundError
from .fuel_entry import FuelEntry
from .calculations import MetricSummary, days_between, ratio, summarize
from .ordering import (
    canonical_order,
    is_canonical_order,
    require_canonical_order,
    select_vehicle,
    vehicle_labels,
)
from .segments import Segment, compute_segments
from .stats import FuelStats, compute_statistics
from .series import SeriesName, SeriesPoint, compute_series, compute_all_series
from .store import EntryStore
from .reconcile import ImportResult, reconcile
from .settings import Settings
from .fuel_log import FuelLog
from .loader import (
    create_log,
    entry_from_dict,
    entry_to_dict,
    load_log,
    load_settings,
    save_log,
    save_settings,
)
from .import_export import (
    ImportBatch,
    export_csv,
    export_json,
    parse_csv_import,
    parse_import,
    parse_json_import,
    select_export_entries,
)

__all__ = [
    "FuelLogError",
    "InvalidInputError",
    "EntryNotFoundError",
    "FuelEntry",
    "MetricSummary",
    "days_between",
    "ratio",
    "summarize",
    "canonical_order",
    "is_canonical_order",
    "require_canonical_order",
    "select_vehicle",
    "vehicle_labels",
    "Segment",
    "compute_segments",
    "FuelStats",
    "compute_statistics",
    "SeriesName",
    "SeriesPoint",
    "compute_series",
    "compute_all_series",
    "EntryStore",
    "ImportResult",
    "reconcile",
    "Settings",
    "FuelLog",
    "create_log",
    "entry_from_dict",
    "entry_to_dict",
    "load_log",
    "load_settings",
    "save_log",
    "save_settings",
    "ImportBatch",
    "export_csv",
    "export_json",
    "parse_csv_import",
    "parse_import",
    "parse_json_import",
    "select_export_entries",
]
