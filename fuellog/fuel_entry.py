"""FuelEntry dataclass for refueling records."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FuelEntry:
    """A single refueling event.

    Entries are never modified in place; the store replaces them wholesale.
    """

    id: str
    date: str
    odometer: float
    fuel_amount: float
    cost: float
    partial_fill: bool = False
    vehicle: Optional[str] = None
    fuel_unit: Optional[str] = None
    currency: Optional[str] = None
    fuel_type: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    modified_at: Optional[str] = None

    @property
    def is_full_fill(self) -> bool:
        return not self.partial_fill

    @property
    def price_per_unit(self) -> Optional[float]:
        """Cost per unit of fuel, or None when no fuel was added."""
        if self.fuel_amount > 0:
            return self.cost / self.fuel_amount
        return None
