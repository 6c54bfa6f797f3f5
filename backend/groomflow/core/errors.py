"""Domain exceptions raised by the service layer."""

from __future__ import annotations


class GroomFlowError(Exception):
    """Base class for domain errors surfaced to API callers."""


class InvalidStateError(GroomFlowError):
    """The appointment or kennel is not in a state that allows the operation."""


class KennelOccupiedError(InvalidStateError):
    """The requested kennel is held by a different appointment."""


class NotFoundError(GroomFlowError):
    """The referenced row does not exist within the caller's salon."""


class StorageError(GroomFlowError):
    """The underlying database operation failed; nothing was persisted."""


__all__ = [
    "GroomFlowError",
    "InvalidStateError",
    "KennelOccupiedError",
    "NotFoundError",
    "StorageError",
]
