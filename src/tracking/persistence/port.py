"""Persistence port — storage operations for tracked orders and checkpoints.

The store and ledger program against this port; adapters are swapped via
configuration. Adapters report outcomes the way a database does (generated
identity, rows affected, ``None`` for a missing row) and leave it to the
callers to decide what counts as a failure.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime

from tracking.tracked_order.checkpoint import OrderCheckpoint
from tracking.tracked_order.tracked_order import TrackedOrder


class TrackingPersistencePort(ABC):
    """Abstract interface for tracking persistence adapters."""

    # -------------------------------------------------------------------
    # Tracked orders
    # -------------------------------------------------------------------
    @abstractmethod
    async def create_tracked_order(self, order: TrackedOrder) -> int:
        """Insert a tracked order.

        Returns:
            The generated identity. A value <= 0 means the insert failed.
        """
        ...

    @abstractmethod
    async def get_tracked_order(self, tracked_order_id: int) -> TrackedOrder | None: ...

    @abstractmethod
    async def get_all_tracked_orders(self) -> list[TrackedOrder]: ...

    @abstractmethod
    async def update_tracked_order(
        self,
        tracked_order_id: int,
        estimated_delivery_date: date,
        status: str,
        delivery_address: str | None = None,
    ) -> int:
        """Replace the mutable fields of a tracked order.

        ``delivery_address`` is left untouched when ``None``.

        Returns:
            Number of rows affected.
        """
        ...

    @abstractmethod
    async def delete_tracked_order(self, tracked_order_id: int) -> int:
        """Returns the number of rows removed."""
        ...

    # -------------------------------------------------------------------
    # Checkpoints
    # -------------------------------------------------------------------
    @abstractmethod
    async def create_checkpoint(self, checkpoint: OrderCheckpoint) -> int:
        """Insert a checkpoint. Same identity contract as ``create_tracked_order``."""
        ...

    @abstractmethod
    async def get_checkpoint(self, checkpoint_id: int) -> OrderCheckpoint | None: ...

    @abstractmethod
    async def get_checkpoints_for_order(self, tracked_order_id: int) -> list[OrderCheckpoint]:
        """All checkpoints of a tracked order, in insertion order."""
        ...

    @abstractmethod
    async def update_checkpoint(
        self,
        checkpoint_id: int,
        timestamp: datetime,
        location: str | None,
        description: str,
        status: str,
    ) -> int:
        """Replace all mutable fields of a checkpoint. Returns rows affected."""
        ...

    @abstractmethod
    async def delete_checkpoint(self, checkpoint_id: int) -> int:
        """Returns the number of rows removed."""
        ...
