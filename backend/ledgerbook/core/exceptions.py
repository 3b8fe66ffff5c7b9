"""
Failure taxonomy shared by every service.

The HTTP layer maps these onto status codes; services never raise
HTTPException themselves.
"""


class LedgerError(Exception):
    """Base class for all domain failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(LedgerError, ValueError):
    """Malformed or out-of-domain request data."""


class NotFound(LedgerError):
    """A referenced entity does not exist."""

    def __init__(self, target: str, message: str = None):
        super().__init__(message or f"{target} not found")
        self.target = target


class CapacityExceeded(LedgerError):
    """An allocation would overrun a transaction's or a document's unallocated amount."""

    def __init__(self, side: str, entity: str, available: int, requested: int, message: str = None):
        super().__init__(
            message or f"{entity} only has {available} paise unallocated (requested {requested})"
        )
        self.side = side
        self.entity = entity
        self.available = available
        self.requested = requested


class StoreFailure(LedgerError):
    """The relational store rejected or failed an operation."""
