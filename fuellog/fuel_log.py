"""FuelLog class - the aggregate of settings and refuel entries."""

from typing import Any, List, Optional, Union

from .fuel_entry import FuelEntry
from .ordering import canonical_order, select_vehicle, vehicle_labels
from .segments import Segment, compute_segments
from .series import SeriesName, SeriesPoint, compute_series
from .settings import Settings
from .stats import FuelStats, compute_statistics
from .store import EntryStore


class FuelLog:
    """A user's fuel log: settings plus the entry store."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[EntryStore] = None,
    ):
        self.settings = settings or Settings()
        self.store = store or EntryStore()

    @property
    def vehicles(self) -> List[str]:
        return vehicle_labels(self.store.all_entries())

    def add_entry(self, **fields: Any) -> FuelEntry:
        """Add an entry, filling vehicle, unit and currency from settings."""
        if fields.get("vehicle") is None:
            fields["vehicle"] = self.settings.vehicle
        if fields.get("fuel_unit") is None:
            fields["fuel_unit"] = self.settings.fuel_unit
        if fields.get("currency") is None:
            fields["currency"] = self.settings.currency
        return self.store.add_entry(**fields)

    def entries(self, vehicle: Optional[str] = None) -> List[FuelEntry]:
        """Entries for a vehicle (or all when None) in canonical order."""
        return canonical_order(select_vehicle(self.store.all_entries(), vehicle))

    def segments(self, vehicle: Optional[str] = None) -> List[Segment]:
        return compute_segments(self.entries(vehicle))

    def statistics(self, vehicle: Optional[str] = None) -> Optional[FuelStats]:
        return compute_statistics(self.entries(vehicle))

    def series(
        self, name: Union[str, SeriesName], vehicle: Optional[str] = None
    ) -> Optional[List[SeriesPoint]]:
        return compute_series(name, self.entries(vehicle))
