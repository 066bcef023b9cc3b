"""Fake persistence adapter — in-memory rows with configurable write failures.

Used to exercise the store and ledger against a database that reports a
failed insert (identity 0 or negative) or an update that touched no rows.
"""

from datetime import date, datetime

from tracking.persistence.port import TrackingPersistencePort
from tracking.tracked_order.checkpoint import OrderCheckpoint
from tracking.tracked_order.tracked_order import TrackedOrder


class FakePersistence(TrackingPersistencePort):
    """Persistence that keeps rows in dicts and succeeds by default."""

    def __init__(self):
        self.tracked_orders: dict[int, dict] = {}
        self.checkpoints: dict[int, dict] = {}
        self._last_tracked_order_id = 0
        self._last_checkpoint_id = 0
        self.should_succeed = True
        self.failed_identity = 0

    def configure(self, should_succeed: bool = True, failed_identity: int = 0):
        """Configure the fake adapter behavior for testing.

        When writes fail, inserts return ``failed_identity`` and updates and
        deletes report zero rows. Reads keep working.
        """
        self.should_succeed = should_succeed
        self.failed_identity = failed_identity

    # -------------------------------------------------------------------
    # Tracked orders
    # -------------------------------------------------------------------
    async def create_tracked_order(self, order: TrackedOrder) -> int:
        if not self.should_succeed:
            return self.failed_identity

        self._last_tracked_order_id += 1
        self.tracked_orders[self._last_tracked_order_id] = {
            "tracked_order_id": self._last_tracked_order_id,
            "order_id": order.order_id,
            "estimated_delivery_date": order.estimated_delivery_date,
            "delivery_address": order.delivery_address,
            "current_status": order.current_status,
        }
        return self._last_tracked_order_id

    async def get_tracked_order(self, tracked_order_id: int) -> TrackedOrder | None:
        row = self.tracked_orders.get(tracked_order_id)
        return TrackedOrder(**row) if row else None

    async def get_all_tracked_orders(self) -> list[TrackedOrder]:
        return [TrackedOrder(**row) for row in self.tracked_orders.values()]

    async def update_tracked_order(
        self,
        tracked_order_id: int,
        estimated_delivery_date: date,
        status: str,
        delivery_address: str | None = None,
    ) -> int:
        row = self.tracked_orders.get(tracked_order_id)
        if not self.should_succeed or row is None:
            return 0

        row["estimated_delivery_date"] = estimated_delivery_date
        row["current_status"] = status
        if delivery_address is not None:
            row["delivery_address"] = delivery_address
        return 1

    async def delete_tracked_order(self, tracked_order_id: int) -> int:
        if not self.should_succeed or tracked_order_id not in self.tracked_orders:
            return 0
        del self.tracked_orders[tracked_order_id]
        return 1

    # -------------------------------------------------------------------
    # Checkpoints
    # -------------------------------------------------------------------
    async def create_checkpoint(self, checkpoint: OrderCheckpoint) -> int:
        if not self.should_succeed:
            return self.failed_identity

        self._last_checkpoint_id += 1
        self.checkpoints[self._last_checkpoint_id] = {
            "checkpoint_id": self._last_checkpoint_id,
            "tracked_order_id": checkpoint.tracked_order_id,
            "timestamp": checkpoint.timestamp,
            "location": checkpoint.location,
            "description": checkpoint.description,
            "status": checkpoint.status,
        }
        return self._last_checkpoint_id

    async def get_checkpoint(self, checkpoint_id: int) -> OrderCheckpoint | None:
        row = self.checkpoints.get(checkpoint_id)
        return OrderCheckpoint(**row) if row else None

    async def get_checkpoints_for_order(self, tracked_order_id: int) -> list[OrderCheckpoint]:
        return [
            OrderCheckpoint(**row) for row in self.checkpoints.values() if row["tracked_order_id"] == tracked_order_id
        ]

    async def update_checkpoint(
        self,
        checkpoint_id: int,
        timestamp: datetime,
        location: str | None,
        description: str,
        status: str,
    ) -> int:
        row = self.checkpoints.get(checkpoint_id)
        if not self.should_succeed or row is None:
            return 0

        row.update(timestamp=timestamp, location=location, description=description, status=status)
        return 1

    async def delete_checkpoint(self, checkpoint_id: int) -> int:
        if not self.should_succeed or checkpoint_id not in self.checkpoints:
            return 0
        del self.checkpoints[checkpoint_id]
        return 1

    def reset(self):
        """Clear all rows and restore default behavior (useful between tests)."""
        self.tracked_orders.clear()
        self.checkpoints.clear()
        self._last_tracked_order_id = 0
        self._last_checkpoint_id = 0
        self.should_succeed = True
        self.failed_identity = 0
