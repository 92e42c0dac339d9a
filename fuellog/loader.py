"""YAML loading and saving utilities for fuel logs."""

import logging
import math
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .calculations import normalize_date
from .errors import InvalidInputError
from .fuel_entry import FuelEntry
from .fuel_log import FuelLog
from .settings import Settings, settings_from_dict, settings_to_dict
from .store import EntryStore

logger = logging.getLogger(__name__)

# (attribute, serialized key) in export column order
ENTRY_FIELDS: List[Tuple[str, str]] = [
    ("id", "id"),
    ("date", "date"),
    ("vehicle", "vehicle"),
    ("odometer", "odometer"),
    ("fuel_amount", "fuelAmount"),
    ("fuel_unit", "fuelUnit"),
    ("cost", "cost"),
    ("currency", "currency"),
    ("partial_fill", "partialFill"),
    ("fuel_type", "fuelType"),
    ("location", "location"),
    ("notes", "notes"),
    ("created_at", "createdAt"),
    ("modified_at", "modifiedAt"),
]

_TEXT_FIELDS = [
    ("vehicle", "vehicle"),
    ("fuel_unit", "fuelUnit"),
    ("currency", "currency"),
    ("fuel_type", "fuelType"),
    ("location", "location"),
    ("notes", "notes"),
    ("created_at", "createdAt"),
    ("modified_at", "modifiedAt"),
]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _amount(dct: Dict[str, Any], key: str, entry_id: str) -> float:
    value = dct.get(key)
    if value is None:
        return 0.0
    if not _is_number(value):
        raise InvalidInputError(f"Entry {entry_id}: {key} must be a number")
    if not math.isfinite(value):
        raise InvalidInputError(f"Entry {entry_id}: {key} must be finite")
    if value < 0:
        raise InvalidInputError(f"Entry {entry_id}: {key} cannot be negative")
    return float(value)


def entry_from_dict(dct: Dict[str, Any]) -> FuelEntry:
    """
    Build a FuelEntry from a serialized mapping (camelCase keys).

    Requires id, an ISO-8601 date and a finite, non-negative odometer.
    The date is stored in normalized form. Missing fuelAmount and cost
    default to 0.
    """
    entry_id = _text(dct.get("id"))
    if entry_id is None:
        raise InvalidInputError("Entry is missing an id")
    entry_date = _text(dct.get("date"))
    if entry_date is None:
        raise InvalidInputError(f"Entry {entry_id}: missing date")
    try:
        entry_date = normalize_date(entry_date)
    except InvalidInputError as e:
        raise InvalidInputError(f"Entry {entry_id}: {e}") from None
    if not _is_number(dct.get("odometer")):
        raise InvalidInputError(f"Entry {entry_id}: odometer must be a number")

    text_fields = {attr: _text(dct.get(key)) for attr, key in _TEXT_FIELDS}
    return FuelEntry(
        id=entry_id,
        date=entry_date,
        odometer=_amount(dct, "odometer", entry_id),
        fuel_amount=_amount(dct, "fuelAmount", entry_id),
        cost=_amount(dct, "cost", entry_id),
        partial_fill=bool(dct.get("partialFill", False)),
        **text_fields,
    )


def entry_to_dict(entry: FuelEntry) -> Dict[str, Any]:
    """Serialize a FuelEntry (camelCase keys, None values omitted)."""
    d: Dict[str, Any] = {}
    for attr, key in ENTRY_FIELDS:
        value = getattr(entry, attr)
        if value is not None:
            d[key] = value
    return d


def _write_yaml(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def read_log_data(filename: Union[str, Path]) -> Dict[str, Any]:
    """
    Read the raw mapping of a fuel log file.

    Unquoted YAML dates and timestamps in entries are turned into
    ISO-8601 text, the form entries are stored in.
    """
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader) or {}

    if not isinstance(data, dict):
        raise InvalidInputError(
            f"{filename}: expected a mapping with settings and entries"
        )
    entries = data.get("entries")
    for dct in entries if isinstance(entries, list) else []:
        if not isinstance(dct, dict):
            continue
        for key, value in dct.items():
            if isinstance(value, date):
                dct[key] = value.isoformat()
    return data


def load_log(filename: Union[str, Path]) -> FuelLog:
    """Load a fuel log from a YAML file."""
    data = read_log_data(filename)

    settings = settings_from_dict(data.get("settings"))
    entries = [entry_from_dict(dct) for dct in data.get("entries") or []]
    logger.debug("Loaded %d entries from %s", len(entries), filename)
    return FuelLog(settings, EntryStore(entries))


def save_log(filename: Union[str, Path], log: FuelLog) -> None:
    """
    Write a fuel log to a YAML file.

    Entries are written oldest first so diffs of the file stay readable.
    """
    entries = list(reversed(log.store.all_entries()))
    data = {
        "settings": settings_to_dict(log.settings),
        "entries": [entry_to_dict(e) for e in entries],
    }
    _write_yaml(filename, data)
    logger.debug("Saved %d entries to %s", len(entries), filename)


def create_log(
    filename: Union[str, Path], settings: Optional[Settings] = None
) -> FuelLog:
    """Create a new, empty fuel log file."""
    log = FuelLog(settings)
    save_log(filename, log)
    return log


def load_settings(filename: Union[str, Path]) -> Settings:
    """Read only the settings section of a fuel log file."""
    data = read_log_data(filename)
    return settings_from_dict(data.get("settings"))


def save_settings(filename: Union[str, Path], settings: Settings) -> None:
    """
    Replace the settings section of a fuel log file.

    Loads the raw YAML so entries are written back untouched.
    """
    data = read_log_data(filename)

    data["settings"] = settings_to_dict(settings)
    data.setdefault("entries", [])
    _write_yaml(filename, data)
