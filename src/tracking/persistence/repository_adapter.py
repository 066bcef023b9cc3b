"""Repository adapter — persists tracking records through protean repositories.

Requires an active ``tracking`` domain context. Integer identities come from
``IdentitySequence`` records, so they keep increasing across deletions.
"""

from datetime import date, datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from tracking.persistence.port import TrackingPersistencePort
from tracking.tracked_order.checkpoint import OrderCheckpoint
from tracking.tracked_order.sequence import (
    CHECKPOINT_SEQUENCE,
    TRACKED_ORDER_SEQUENCE,
    IdentitySequence,
)
from tracking.tracked_order.tracked_order import TrackedOrder


def _next_identity(sequence_name: str) -> int:
    repo = current_domain.repository_for(IdentitySequence)
    try:
        sequence = repo.get(sequence_name)
    except ObjectNotFoundError:
        sequence = IdentitySequence(name=sequence_name)
    value = sequence.advance()
    repo.add(sequence)
    return value


def _query(aggregate_cls):
    """Unbounded query; protean caps result sets at the entity limit otherwise."""
    return current_domain.repository_for(aggregate_cls)._dao.query.limit(None)


def _find_one(aggregate_cls, **filters):
    items = _query(aggregate_cls).filter(**filters).all().items
    return items[0] if items else None


class RepositoryPersistence(TrackingPersistencePort):
    """Persistence backed by the providers configured on the tracking domain."""

    async def create_tracked_order(self, order: TrackedOrder) -> int:
        tracked_order_id = _next_identity(TRACKED_ORDER_SEQUENCE)
        current_domain.repository_for(TrackedOrder).add(
            TrackedOrder(
                tracked_order_id=tracked_order_id,
                order_id=order.order_id,
                estimated_delivery_date=order.estimated_delivery_date,
                delivery_address=order.delivery_address,
                current_status=order.current_status,
            )
        )
        return tracked_order_id

    async def get_tracked_order(self, tracked_order_id: int) -> TrackedOrder | None:
        return _find_one(TrackedOrder, tracked_order_id=tracked_order_id)

    async def get_all_tracked_orders(self) -> list[TrackedOrder]:
        items = _query(TrackedOrder).all().items
        return sorted(items, key=lambda o: o.tracked_order_id)

    async def update_tracked_order(
        self,
        tracked_order_id: int,
        estimated_delivery_date: date,
        status: str,
        delivery_address: str | None = None,
    ) -> int:
        record = _find_one(TrackedOrder, tracked_order_id=tracked_order_id)
        if record is None:
            return 0

        record.estimated_delivery_date = estimated_delivery_date
        record.current_status = status
        if delivery_address is not None:
            record.delivery_address = delivery_address
        current_domain.repository_for(TrackedOrder).add(record)
        return 1

    async def delete_tracked_order(self, tracked_order_id: int) -> int:
        record = _find_one(TrackedOrder, tracked_order_id=tracked_order_id)
        if record is None:
            return 0
        current_domain.repository_for(TrackedOrder)._dao.delete(record)
        return 1

    async def create_checkpoint(self, checkpoint: OrderCheckpoint) -> int:
        checkpoint_id = _next_identity(CHECKPOINT_SEQUENCE)
        current_domain.repository_for(OrderCheckpoint).add(
            OrderCheckpoint(
                checkpoint_id=checkpoint_id,
                tracked_order_id=checkpoint.tracked_order_id,
                timestamp=checkpoint.timestamp,
                location=checkpoint.location,
                description=checkpoint.description,
                status=checkpoint.status,
            )
        )
        return checkpoint_id

    async def get_checkpoint(self, checkpoint_id: int) -> OrderCheckpoint | None:
        return _find_one(OrderCheckpoint, checkpoint_id=checkpoint_id)

    async def get_checkpoints_for_order(self, tracked_order_id: int) -> list[OrderCheckpoint]:
        items = _query(OrderCheckpoint).filter(tracked_order_id=tracked_order_id).all().items
        # Identities are issued in insertion order
        return sorted(items, key=lambda c: c.checkpoint_id)

    async def update_checkpoint(
        self,
        checkpoint_id: int,
        timestamp: datetime,
        location: str | None,
        description: str,
        status: str,
    ) -> int:
        record = _find_one(OrderCheckpoint, checkpoint_id=checkpoint_id)
        if record is None:
            return 0

        record.timestamp = timestamp
        record.location = location
        record.description = description
        record.status = status
        current_domain.repository_for(OrderCheckpoint).add(record)
        return 1

    async def delete_checkpoint(self, checkpoint_id: int) -> int:
        record = _find_one(OrderCheckpoint, checkpoint_id=checkpoint_id)
        if record is None:
            return 0
        current_domain.repository_for(OrderCheckpoint)._dao.delete(record)
        return 1
