"""In-memory record store for fuel entries."""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .errors import EntryNotFoundError
from .fuel_entry import FuelEntry

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _newest_first(entries: Iterable[FuelEntry]) -> List[FuelEntry]:
    return sorted(entries, key=lambda e: (e.date, e.odometer), reverse=True)


class EntryStore:
    """
    Fuel entries keyed by id.

    The store owns id assignment and audit timestamps. Reads return
    entries newest first, which is display order, not analytics order.
    """

    def __init__(self, entries: Optional[Iterable[FuelEntry]] = None):
        self._entries: Dict[str, FuelEntry] = {}
        for entry in entries or []:
            self._entries[entry.id] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    @property
    def count(self) -> int:
        return len(self._entries)

    def has_entry(self, entry_id: str) -> bool:
        return entry_id in self._entries

    def get_entry(self, entry_id: str) -> FuelEntry:
        """Return the entry with this id or raise EntryNotFoundError."""
        try:
            return self._entries[entry_id]
        except KeyError:
            raise EntryNotFoundError(entry_id) from None

    def find_entry(self, entry_id: str) -> Optional[FuelEntry]:
        """Return the entry with this id, or None."""
        return self._entries.get(entry_id)

    def add_entry(self, **fields: Any) -> FuelEntry:
        """Create an entry with a new id and fresh timestamps."""
        now = _now()
        fields.setdefault("created_at", now)
        fields.setdefault("modified_at", now)
        entry = FuelEntry(id=str(uuid.uuid4()), **fields)
        self._entries[entry.id] = entry
        logger.debug("Added entry %s (%s @ %s)", entry.id, entry.date, entry.odometer)
        return entry

    def update_entry(self, entry_id: str, **changes: Any) -> FuelEntry:
        """Merge changes into an existing entry and bump its modified time."""
        existing = self.get_entry(entry_id)
        changes.pop("id", None)
        changes.pop("created_at", None)
        changes["modified_at"] = _now()
        entry = replace(existing, **changes)
        self._entries[entry_id] = entry
        logger.debug("Updated entry %s", entry_id)
        return entry

    def delete_entry(self, entry_id: str) -> None:
        if entry_id not in self._entries:
            raise EntryNotFoundError(entry_id)
        del self._entries[entry_id]
        logger.debug("Deleted entry %s", entry_id)

    def delete_entries(self, entry_ids: Iterable[str]) -> None:
        """Delete several entries; nothing is deleted if any id is missing."""
        entry_ids = list(entry_ids)
        for entry_id in entry_ids:
            if entry_id not in self._entries:
                raise EntryNotFoundError(entry_id)
        for entry_id in entry_ids:
            del self._entries[entry_id]
        logger.debug("Deleted %d entries", len(entry_ids))

    def put_many(self, entries: Iterable[FuelEntry]) -> None:
        """
        Insert or replace entries as one batch.

        The new mapping is built before it replaces the current one,
        so a failure part way leaves the store unchanged.
        """
        updated = dict(self._entries)
        for entry in entries:
            updated[entry.id] = entry
        self._entries = updated

    def all_entries(self) -> List[FuelEntry]:
        """All entries, newest first."""
        return _newest_first(self._entries.values())

    def entries_for_vehicle(self, vehicle: Optional[str]) -> List[FuelEntry]:
        """Entries for one vehicle label, newest first."""
        return _newest_first(e for e in self._entries.values() if e.vehicle == vehicle)

    def entries_in_date_range(self, start_date: str, end_date: str) -> List[FuelEntry]:
        """
        Entries dated within [start_date, end_date], newest first.

        A date-only end bound includes timestamps on that day.
        """
        return _newest_first(
            e
            for e in self._entries.values()
            if start_date <= e.date and e.date[: len(end_date)] <= end_date
        )
