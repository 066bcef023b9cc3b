"""TrackedOrder aggregate — the current-status projection of one physical order.

``current_status`` mirrors the status of the checkpoint most recently written
or edited for the order. The orchestrator keeps the two in step; nothing here
enforces a forward-only order of statuses.
"""

from enum import Enum

from protean.fields import Date, Integer, String

from tracking.domain import tracking


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Statuses that tell the buyer their parcel is moving
SHIPPING_PROGRESS_STATUSES = frozenset({OrderStatus.SHIPPED, OrderStatus.OUT_FOR_DELIVERY})


def status_value(status: OrderStatus | str) -> str:
    """Normalize an ``OrderStatus`` or its text to the stored string."""
    return OrderStatus(status).value


def is_shipping_progress(status: OrderStatus | str) -> bool:
    return OrderStatus(status) in SHIPPING_PROGRESS_STATUSES


@tracking.aggregate
class TrackedOrder:
    """Fulfillment state of a purchased order.

    ``tracked_order_id`` is assigned by the store on creation and is empty
    until then; ``order_id`` refers to an order owned by another context.
    """

    tracked_order_id = Integer()
    order_id = Integer(required=True)
    estimated_delivery_date = Date(required=True)
    delivery_address = String(max_length=500)
    current_status = String(
        max_length=50,
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
