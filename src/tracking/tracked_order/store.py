"""Tracked Order Store — CRUD for TrackedOrder records."""

from datetime import date

import structlog

from tracking.errors import InvalidArgumentError, NotFoundError, PersistenceError
from tracking.persistence.port import TrackingPersistencePort
from tracking.tracked_order.tracked_order import OrderStatus, TrackedOrder, status_value

logger = structlog.get_logger(__name__)


class TrackedOrderStore:
    def __init__(self, persistence: TrackingPersistencePort):
        self._persistence = persistence

    async def create(self, order: TrackedOrder) -> int:
        """Insert ``order`` and return the identity the persistence layer assigned."""
        if order is None or order.order_id is None:
            raise InvalidArgumentError("A tracked order needs an order_id")

        tracked_order_id = await self._persistence.create_tracked_order(order)
        if not tracked_order_id or tracked_order_id <= 0:
            raise PersistenceError("Unexpected error when trying to add the TrackedOrder")

        logger.debug("Tracked order stored", tracked_order_id=tracked_order_id, order_id=order.order_id)
        return tracked_order_id

    async def get_by_id(self, tracked_order_id: int) -> TrackedOrder:
        order = await self._persistence.get_tracked_order(tracked_order_id)
        if order is None:
            raise NotFoundError(f"TrackedOrder {tracked_order_id} does not exist")
        return order

    async def get_all(self) -> list[TrackedOrder]:
        return await self._persistence.get_all_tracked_orders()

    async def update(
        self,
        tracked_order_id: int,
        estimated_delivery_date: date,
        status: OrderStatus | str,
        delivery_address: str | None = None,
    ) -> None:
        rows = await self._persistence.update_tracked_order(
            tracked_order_id,
            estimated_delivery_date,
            status_value(status),
            delivery_address=delivery_address,
        )
        if rows == 0:
            raise PersistenceError(f"TrackedOrder {tracked_order_id} was not updated")

    async def delete(self, tracked_order_id: int) -> bool:
        """Remove a tracked order; False when there was nothing to remove."""
        return await self._persistence.delete_tracked_order(tracked_order_id) == 1
