"""
Fault taxonomy raised by the entity stores.

Only faults are exceptional. A lookup that finds nothing returns None, an empty
list or False instead of raising.
"""

from typing import Optional


class StoreFault(Exception):
    """Base class for every store fault."""


class ValidationFault(StoreFault):
    """Caller-supplied data violates a domain invariant."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundFault(StoreFault):
    """The backing document does not exist."""


class SchemaFault(StoreFault):
    """A document does not have the required top-level shape."""


class CorruptionFault(StoreFault):
    """A document exists but its content cannot be decoded."""


class StorageFault(StoreFault):
    """Underlying disk I/O failed."""
