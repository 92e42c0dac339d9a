"""Exceptions raised by the fuel log."""


class FuelLogError(Exception):
    """Base class for fuel log errors."""


class InvalidInputError(FuelLogError, ValueError):
    """An operation was called with input that breaks its preconditions."""


class EntryNotFoundError(FuelLogError, LookupError):
    """No entry exists with the requested id."""

    def __init__(self, entry_id: str):
        super().__init__(f"Entry not found: {entry_id}")
        self.entry_id = entry_id
