"""Merge imported entries into a store by id."""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable

from .fuel_entry import FuelEntry
from .store import EntryStore

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Outcome counts for one imported batch."""

    added: int = 0
    skipped: int = 0
    overwritten: int = 0

    @property
    def total(self) -> int:
        return self.added + self.skipped + self.overwritten


def reconcile(
    store: EntryStore, incoming: Iterable[FuelEntry], overwrite: bool = False
) -> ImportResult:
    """
    Merge incoming entries into the store.

    - Unknown id: entry is added
    - Known id, overwrite=False: existing entry is kept, incoming skipped
    - Known id, overwrite=True: existing entry is replaced entirely

    Entries are matched in batch order, so a repeated id within the batch
    sees the earlier copy as existing. All writes are applied to the store
    in one batch after every outcome is decided.
    """
    result = ImportResult()
    pending: Dict[str, FuelEntry] = {}

    for entry in incoming:
        exists = entry.id in pending or store.has_entry(entry.id)
        if not exists:
            pending[entry.id] = entry
            result.added += 1
        elif overwrite:
            pending[entry.id] = entry
            result.overwritten += 1
        else:
            result.skipped += 1

    store.put_many(pending.values())
    logger.info(
        "Import: %d added, %d skipped, %d overwritten",
        result.added,
        result.skipped,
        result.overwritten,
    )
    return result
