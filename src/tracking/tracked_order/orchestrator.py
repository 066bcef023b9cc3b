"""Tracked-order orchestrator — keeps current status in step with the checkpoint ledger.

The orchestrator is the only entry point callers use. Every public operation
is a short sequence of persistence steps (write, read back, dependent write)
followed, where the resulting status calls for it, by a best-effort shipping
progress notification.

Status rule:
    ``TrackedOrder.current_status`` mirrors the status of the checkpoint the
    orchestrator most recently wrote or edited. Any status may follow any
    other. Editing an older checkpoint pushes *its* status onto the order
    (see ``_sync_on_every_edit``), so the last edit wins over recency.

Reversion:
    ``revert_to_previous_checkpoint`` deletes the latest checkpoint (maximum
    timestamp, last inserted on ties) and restores the status of the new
    latest one. It refuses to go below one remaining checkpoint.
    ``revert_to_last_checkpoint`` is non-destructive: it re-applies the latest
    checkpoint's status to the order.

Concurrency:
    Steps are not wrapped in a transaction. With ``serialize_per_order`` on,
    each mutating operation holds a lock keyed by TrackedOrderID for its
    whole sequence; with it off, concurrent writers to the same order can
    interleave.
"""

from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from typing import Callable

import structlog

from tracking.errors import (
    InvalidArgumentError,
    InvalidOperationError,
    PersistenceError,
)
from tracking.gateway.dispatch import notify_buyer_best_effort
from tracking.gateway.port import NotificationGatewayPort
from tracking.lookup.port import OrderLookupPort
from tracking.tracked_order.checkpoint import OrderCheckpoint
from tracking.tracked_order.ledger import CheckpointLedger
from tracking.tracked_order.locks import OrderLockArena
from tracking.tracked_order.store import TrackedOrderStore
from tracking.tracked_order.tracked_order import (
    OrderStatus,
    TrackedOrder,
    is_shipping_progress,
    status_value,
)

logger = structlog.get_logger(__name__)

MINIMUM_CHECKPOINTS_FOR_REVERSION = 1
DEFAULT_NOTIFICATION_TIMEOUT = 5.0


def latest_by_timestamp(checkpoints: list[OrderCheckpoint]) -> OrderCheckpoint | None:
    """Checkpoint with the greatest timestamp; the later-inserted one wins ties."""
    latest = None
    for checkpoint in checkpoints:
        if latest is None or checkpoint.timestamp >= latest.timestamp:
            latest = checkpoint
    return latest


class TrackedOrderOrchestrator:
    def __init__(
        self,
        store: TrackedOrderStore,
        ledger: CheckpointLedger,
        order_lookup: OrderLookupPort,
        gateway: NotificationGatewayPort,
        notification_timeout: float = DEFAULT_NOTIFICATION_TIMEOUT,
        serialize_per_order: bool = False,
        clock: Callable[[], datetime] | None = None,
    ):
        self._store = store
        self._ledger = ledger
        self._order_lookup = order_lookup
        self._gateway = gateway
        self.notification_timeout = notification_timeout
        self._locks = OrderLockArena() if serialize_per_order else None
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def serialize_per_order(self) -> bool:
        return self._locks is not None

    # -------------------------------------------------------------------
    # Serialization helpers
    # -------------------------------------------------------------------
    @asynccontextmanager
    async def _serialized(self, tracked_order_id: int):
        if self._locks is None:
            yield
            return
        async with self._locks.hold(tracked_order_id):
            yield

    @asynccontextmanager
    async def _serialized_by_checkpoint(self, checkpoint_id: int):
        if self._locks is None:
            yield
            return
        checkpoint = await self._ledger.get_by_id(checkpoint_id)
        async with self._locks.hold(checkpoint.tracked_order_id):
            yield

    async def _notify(self, order: TrackedOrder) -> None:
        await notify_buyer_best_effort(
            self._order_lookup,
            self._gateway,
            order,
            timeout=self.notification_timeout,
            now=self._clock(),
        )

    # -------------------------------------------------------------------
    # Reads and administrative actions
    # -------------------------------------------------------------------
    async def get_tracked_order(self, tracked_order_id: int) -> TrackedOrder:
        return await self._store.get_by_id(tracked_order_id)

    async def get_all_tracked_orders(self) -> list[TrackedOrder]:
        return await self._store.get_all()

    async def get_checkpoint(self, checkpoint_id: int) -> OrderCheckpoint:
        return await self._ledger.get_by_id(checkpoint_id)

    async def get_all_checkpoints(self, tracked_order_id: int) -> list[OrderCheckpoint]:
        return await self._ledger.get_all_for_order(tracked_order_id)

    async def delete_tracked_order(self, tracked_order_id: int) -> bool:
        async with self._serialized(tracked_order_id):
            deleted = await self._store.delete(tracked_order_id)
        logger.info("Tracked order deleted", tracked_order_id=tracked_order_id, deleted=deleted)
        return deleted

    async def delete_checkpoint(self, checkpoint_id: int) -> bool:
        """Remove a checkpoint without touching its order's current status."""
        async with self._serialized_by_checkpoint(checkpoint_id):
            deleted = await self._ledger.delete(checkpoint_id)
        logger.info("Checkpoint deleted", checkpoint_id=checkpoint_id, deleted=deleted)
        return deleted

    # -------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------
    async def create_tracked_order(self, order: TrackedOrder) -> int:
        """Store a new tracked order and tell the buyer its initial status."""
        tracked_order_id = await self._store.create(order)
        order.tracked_order_id = tracked_order_id
        logger.info(
            "Tracked order created",
            tracked_order_id=tracked_order_id,
            order_id=order.order_id,
            status=order.current_status,
        )

        await self._notify(order)
        return tracked_order_id

    async def add_checkpoint(self, checkpoint: OrderCheckpoint) -> int:
        """Record a checkpoint and make its status the order's current status."""
        if checkpoint is None:
            raise InvalidArgumentError("checkpoint is required")

        async with self._serialized(checkpoint.tracked_order_id):
            try:
                checkpoint_id = await self._ledger.create(checkpoint)
                order = await self._store.get_by_id(checkpoint.tracked_order_id)
                order = await self._update_tracked_order(
                    order.tracked_order_id,
                    order.estimated_delivery_date,
                    checkpoint.status,
                    notify=False,
                )
            except PersistenceError as e:
                raise PersistenceError(f"Error adding OrderCheckpoint: {e}") from e

            checkpoint.checkpoint_id = checkpoint_id
            logger.info(
                "Checkpoint added",
                checkpoint_id=checkpoint_id,
                tracked_order_id=checkpoint.tracked_order_id,
                status=checkpoint.status,
            )

            if is_shipping_progress(checkpoint.status):
                await self._notify(order)
        return checkpoint_id

    # -------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------
    async def _update_tracked_order(
        self,
        tracked_order_id: int,
        estimated_delivery_date: date,
        status: OrderStatus | str,
        notify: bool = True,
    ) -> TrackedOrder:
        try:
            await self._store.update(tracked_order_id, estimated_delivery_date, status)
            order = await self._store.get_by_id(tracked_order_id)
        except PersistenceError as e:
            raise PersistenceError(f"Error updating TrackedOrder: {e}") from e

        if notify and is_shipping_progress(order.current_status):
            await self._notify(order)
        return order

    async def update_tracked_order(
        self,
        tracked_order_id: int,
        estimated_delivery_date: date,
        status: OrderStatus | str,
    ) -> None:
        async with self._serialized(tracked_order_id):
            await self._update_tracked_order(tracked_order_id, estimated_delivery_date, status)
        logger.info("Tracked order updated", tracked_order_id=tracked_order_id, status=status_value(status))

    async def update_tracked_order_details(
        self,
        tracked_order_id: int,
        estimated_delivery_date: date,
        delivery_address: str,
        status: OrderStatus | str,
        order_id: int,
    ) -> bool:
        """Update an order that must belong to ``order_id``.

        The write happens before the ownership check, as in the plain update;
        a mismatch is reported as False rather than raised. Never raises.
        """
        try:
            async with self._serialized(tracked_order_id):
                await self._store.update(
                    tracked_order_id,
                    estimated_delivery_date,
                    status,
                    delivery_address=delivery_address,
                )
                order = await self._store.get_by_id(tracked_order_id)
                if order.order_id != order_id:
                    logger.warning(
                        "Tracked order belongs to another order",
                        tracked_order_id=tracked_order_id,
                        expected_order_id=order_id,
                        actual_order_id=order.order_id,
                    )
                    return False

                if is_shipping_progress(order.current_status):
                    await self._notify(order)
        except Exception as e:
            logger.warning("Tracked order update failed", tracked_order_id=tracked_order_id, error=str(e))
            return False
        return True

    async def _sync_on_every_edit(self, checkpoint: OrderCheckpoint) -> TrackedOrder:
        """Make an edited checkpoint's status the order's current status.

        Applies to any checkpoint, not just the latest one: the last edit wins.
        """
        order = await self._store.get_by_id(checkpoint.tracked_order_id)
        return await self._update_tracked_order(
            order.tracked_order_id,
            order.estimated_delivery_date,
            checkpoint.status,
        )

    async def update_checkpoint(
        self,
        checkpoint_id: int,
        timestamp: datetime,
        location: str | None,
        description: str,
        status: OrderStatus | str,
    ) -> None:
        async with self._serialized_by_checkpoint(checkpoint_id):
            try:
                await self._ledger.update(checkpoint_id, timestamp, location, description, status)
                updated = await self._ledger.get_by_id(checkpoint_id)
                await self._sync_on_every_edit(updated)
            except PersistenceError as e:
                raise PersistenceError(f"Error updating OrderCheckpoint: {e}") from e
        logger.info("Checkpoint updated", checkpoint_id=checkpoint_id, status=status_value(status))

    async def update_checkpoint_for_order(
        self,
        checkpoint_id: int,
        timestamp: datetime,
        location: str | None,
        description: str,
        status: OrderStatus | str,
        tracked_order_id: int,
    ) -> bool:
        """Update a checkpoint that must belong to ``tracked_order_id``. Never raises."""
        try:
            async with self._serialized(tracked_order_id):
                checkpoint = await self._ledger.get_by_id(checkpoint_id)
                if checkpoint.tracked_order_id != tracked_order_id:
                    logger.warning(
                        "Checkpoint belongs to another tracked order",
                        checkpoint_id=checkpoint_id,
                        expected_tracked_order_id=tracked_order_id,
                        actual_tracked_order_id=checkpoint.tracked_order_id,
                    )
                    return False

                await self._ledger.update(checkpoint_id, timestamp, location, description, status)
                updated = await self._ledger.get_by_id(checkpoint_id)
                await self._sync_on_every_edit(updated)
        except Exception as e:
            logger.warning("Checkpoint update failed", checkpoint_id=checkpoint_id, error=str(e))
            return False
        return True

    # -------------------------------------------------------------------
    # History queries
    # -------------------------------------------------------------------
    async def get_last_checkpoint(self, order: TrackedOrder) -> OrderCheckpoint | None:
        if order is None:
            raise InvalidArgumentError("order is required")
        return latest_by_timestamp(await self._ledger.get_all_for_order(order.tracked_order_id))

    async def get_number_of_checkpoints(self, order: TrackedOrder) -> int:
        if order is None:
            raise InvalidArgumentError("order is required")
        return len(await self._ledger.get_all_for_order(order.tracked_order_id))

    # -------------------------------------------------------------------
    # Reversion
    # -------------------------------------------------------------------
    async def revert_to_previous_checkpoint(self, order: TrackedOrder) -> OrderCheckpoint:
        """Undo the latest checkpoint and restore the status before it.

        Returns:
            The checkpoint that is current after the revert.
        """
        if order is None:
            raise InvalidArgumentError("order is required")

        async with self._serialized(order.tracked_order_id):
            if await self.get_number_of_checkpoints(order) <= MINIMUM_CHECKPOINTS_FOR_REVERSION:
                raise InvalidOperationError("Cannot revert further")

            current = await self.get_last_checkpoint(order)
            if current is None:
                raise InvalidOperationError("No checkpoints found to revert")

            if not await self._ledger.delete(current.checkpoint_id):
                raise InvalidOperationError("Failed to delete the current checkpoint")

            previous = await self.get_last_checkpoint(order)
            if previous is None:
                raise InvalidOperationError("No checkpoints found to revert")

            await self._update_tracked_order(
                order.tracked_order_id,
                order.estimated_delivery_date,
                previous.status,
            )

        logger.info(
            "Reverted to previous checkpoint",
            tracked_order_id=order.tracked_order_id,
            removed_checkpoint_id=current.checkpoint_id,
            restored_status=previous.status,
        )
        return previous

    async def revert_to_last_checkpoint(self, order: TrackedOrder) -> bool:
        """Re-apply the latest checkpoint's status to the order. Never raises."""
        if order is None:
            logger.warning("Cannot re-sync a missing tracked order")
            return False

        try:
            async with self._serialized(order.tracked_order_id):
                last = await self.get_last_checkpoint(order)
                if last is None:
                    logger.warning("No checkpoints to re-sync from", tracked_order_id=order.tracked_order_id)
                    return False

                await self._update_tracked_order(
                    order.tracked_order_id,
                    order.estimated_delivery_date,
                    last.status,
                )
        except Exception as e:
            logger.warning("Re-sync to last checkpoint failed", tracked_order_id=order.tracked_order_id, error=str(e))
            return False
        return True
