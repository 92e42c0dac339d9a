"""Import and export of fuel entries as JSON and CSV."""

import csv
import io
import json
import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft7Validator

from .errors import InvalidInputError
from .fuel_entry import FuelEntry
from .loader import ENTRY_FIELDS, entry_from_dict, entry_to_dict
from .store import EntryStore

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.yaml"

SCOPE_ALL = "all"
SCOPE_VEHICLE = "vehicle"
SCOPE_DATE_RANGE = "dateRange"

CSV_HEADERS = [key for _, key in ENTRY_FIELDS]
_NUMERIC_KEYS = ("odometer", "fuelAmount", "cost")


@dataclass
class ImportBatch:
    """Parsed entries ready for reconciliation, plus rejected records."""

    entries: List[FuelEntry] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@lru_cache(maxsize=1)
def load_schema() -> dict:
    """Load the fuel log JSON schema from schema.yaml."""
    with open(SCHEMA_PATH) as f:
        return yaml.safe_load(f)


def _entry_validator() -> Draft7Validator:
    return Draft7Validator(load_schema()["definitions"]["entry"])


def _reject(batch: ImportBatch, label: str, message: str) -> None:
    logger.warning("Rejected %s: %s", label, message)
    batch.errors.append(f"{label}: {message}")


# =============================================================================
# Export
# =============================================================================


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def export_json(entries: List[FuelEntry]) -> str:
    """Serialize entries as a pretty-printed JSON array."""
    return json.dumps([entry_to_dict(e) for e in entries], indent=2)


def export_csv(entries: List[FuelEntry]) -> str:
    """Serialize entries as CSV with a header row."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for entry in entries:
        writer.writerow([_csv_value(getattr(entry, attr)) for attr, _ in ENTRY_FIELDS])
    return buf.getvalue().rstrip("\n")


def select_export_entries(
    store: EntryStore,
    scope: str = SCOPE_ALL,
    vehicle: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> List[FuelEntry]:
    """
    Pick the entries to export, newest first.

    Falls back to every entry when the scope's parameters are missing.
    """
    if scope == SCOPE_VEHICLE and vehicle:
        return store.entries_for_vehicle(vehicle)
    if scope == SCOPE_DATE_RANGE and start_date and end_date:
        return store.entries_in_date_range(start_date, end_date)
    return store.all_entries()


# =============================================================================
# Import
# =============================================================================


def parse_json_import(text: str) -> ImportBatch:
    """
    Parse a JSON export into entries.

    Records that fail schema validation are left out and reported in
    ImportBatch.errors. Anything other than a JSON array gives no entries.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"Invalid JSON: {e}") from e

    batch = ImportBatch()
    if not isinstance(data, list):
        _reject(batch, "document", "expected a JSON array of entries")
        return batch

    validator = _entry_validator()
    for index, record in enumerate(data):
        label = f"record {index}"
        errors = sorted(validator.iter_errors(record), key=lambda e: list(e.path))
        if errors:
            where = ".".join(str(p) for p in errors[0].path)
            message = f"{where}: {errors[0].message}" if where else errors[0].message
            _reject(batch, label, message)
            continue
        try:
            batch.entries.append(entry_from_dict(record))
        except InvalidInputError as e:
            _reject(batch, label, str(e))
    return batch


def _number_or_zero(value: Optional[str]) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_csv_import(text: str) -> ImportBatch:
    """
    Parse a CSV export into entries.

    - Rows without an id get a new one
    - Empty, non-numeric or non-finite fuelAmount and cost become 0
    - Rows with no date, a date that is not ISO-8601, or a missing,
      non-numeric, non-finite or negative odometer are rejected
    - Missing createdAt/modifiedAt are set to now
    """
    batch = ImportBatch()
    reader = csv.DictReader(io.StringIO(text.strip()))
    if reader.fieldnames is None:
        return batch
    reader.fieldnames = [name.strip() for name in reader.fieldnames]

    now = datetime.now(timezone.utc).isoformat()
    for line_no, row in enumerate(reader, start=2):
        label = f"line {line_no}"
        record: Dict[str, Any] = {k: v for k, v in row.items() if k is not None}

        if not record.get("date"):
            _reject(batch, label, "missing date")
            continue
        try:
            odometer = float(record.get("odometer") or "")
        except ValueError:
            _reject(batch, label, "odometer is not a number")
            continue
        if odometer < 0 or not math.isfinite(odometer):
            _reject(batch, label, "odometer must be a finite, non-negative number")
            continue

        record["odometer"] = odometer
        for key in _NUMERIC_KEYS[1:]:
            record[key] = _number_or_zero(record.get(key))
        record["partialFill"] = (record.get("partialFill") or "").strip().lower() in (
            "true",
            "1",
            "yes",
        )
        record["id"] = record.get("id") or str(uuid.uuid4())
        record["createdAt"] = record.get("createdAt") or now
        record["modifiedAt"] = record.get("modifiedAt") or now

        try:
            batch.entries.append(entry_from_dict(record))
        except InvalidInputError as e:
            _reject(batch, label, str(e))
    return batch


def parse_import(text: str, fmt: str) -> ImportBatch:
    """Parse import text by format name ("json" or "csv")."""
    if fmt == "json":
        return parse_json_import(text)
    if fmt == "csv":
        return parse_csv_import(text)
    raise InvalidInputError(f"Unsupported import format: {fmt}")
