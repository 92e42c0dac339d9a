"""User settings stored alongside the fuel log."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

DEFAULT_FUEL_UNIT = "litres"
DEFAULT_CURRENCY = "EUR"


@dataclass
class Settings:
    """Defaults applied to new entries."""

    default_vehicle: str = ""
    fuel_unit: str = DEFAULT_FUEL_UNIT
    currency: str = DEFAULT_CURRENCY

    @property
    def vehicle(self) -> Optional[str]:
        """Default vehicle label, or None when no default is set."""
        return self.default_vehicle or None


def settings_from_dict(dct: Optional[Dict[str, Any]]) -> Settings:
    """Merge a settings mapping over the defaults. Unknown keys are ignored."""
    dct = dct or {}
    defaults = Settings()
    return Settings(
        default_vehicle=dct.get("defaultVehicle") or defaults.default_vehicle,
        fuel_unit=dct.get("fuelUnit") or defaults.fuel_unit,
        currency=dct.get("currency") or defaults.currency,
    )


def settings_to_dict(settings: Settings) -> Dict[str, Any]:
    """Serialize Settings to the YAML dict format (camelCase keys)."""
    return {
        "defaultVehicle": settings.default_vehicle,
        "fuelUnit": settings.fuel_unit,
        "currency": settings.currency,
    }
