"""Error taxonomy for the tracking context.

Store and ledger failures surface either unchanged (``NotFoundError``) or
wrapped with the orchestrator operation that hit them (``PersistenceError``).
Notification failures never reach callers and have no type here.
"""


class TrackingError(Exception):
    """Base class for all tracking errors."""


class NotFoundError(TrackingError):
    """A read by identity matched no record."""


class PersistenceError(TrackingError):
    """A write affected no rows or produced an invalid identity."""


class InvalidOperationError(TrackingError):
    """A business rule forbids the requested operation."""


class InvalidArgumentError(TrackingError, ValueError):
    """A required input was missing."""
