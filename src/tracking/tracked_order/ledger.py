"""Checkpoint Ledger — CRUD for OrderCheckpoint records.

Checkpoints come back in the order they were written. Their timestamps are
whatever the author supplied and may be out of chronological order; the
ledger never re-sorts them.
"""

from datetime import datetime

import structlog

from tracking.errors import InvalidArgumentError, NotFoundError, PersistenceError
from tracking.persistence.port import TrackingPersistencePort
from tracking.tracked_order.checkpoint import OrderCheckpoint
from tracking.tracked_order.tracked_order import OrderStatus, status_value

logger = structlog.get_logger(__name__)


class CheckpointLedger:
    def __init__(self, persistence: TrackingPersistencePort):
        self._persistence = persistence

    async def create(self, checkpoint: OrderCheckpoint) -> int:
        if checkpoint is None or checkpoint.tracked_order_id is None:
            raise InvalidArgumentError("A checkpoint needs a tracked_order_id")

        checkpoint_id = await self._persistence.create_checkpoint(checkpoint)
        if not checkpoint_id or checkpoint_id <= 0:
            raise PersistenceError("Unexpected error when trying to add the OrderCheckpoint")

        logger.debug(
            "Checkpoint recorded",
            checkpoint_id=checkpoint_id,
            tracked_order_id=checkpoint.tracked_order_id,
            status=checkpoint.status,
        )
        return checkpoint_id

    async def get_by_id(self, checkpoint_id: int) -> OrderCheckpoint:
        checkpoint = await self._persistence.get_checkpoint(checkpoint_id)
        if checkpoint is None:
            raise NotFoundError(f"OrderCheckpoint {checkpoint_id} does not exist")
        return checkpoint

    async def get_all_for_order(self, tracked_order_id: int) -> list[OrderCheckpoint]:
        return await self._persistence.get_checkpoints_for_order(tracked_order_id)

    async def latest_for_order(self, tracked_order_id: int) -> OrderCheckpoint | None:
        """The checkpoint written last for the order, regardless of its timestamp."""
        checkpoints = await self.get_all_for_order(tracked_order_id)
        return checkpoints[-1] if checkpoints else None

    async def update(
        self,
        checkpoint_id: int,
        timestamp: datetime,
        location: str | None,
        description: str,
        status: OrderStatus | str,
    ) -> None:
        rows = await self._persistence.update_checkpoint(
            checkpoint_id,
            timestamp,
            location,
            description,
            status_value(status),
        )
        if rows == 0:
            raise PersistenceError(f"OrderCheckpoint {checkpoint_id} was not updated")

    async def delete(self, checkpoint_id: int) -> bool:
        return await self._persistence.delete_checkpoint(checkpoint_id) == 1
