"""OrderCheckpoint aggregate — one observation of fulfillment progress."""

from protean.fields import DateTime, Integer, String

from tracking.domain import tracking
from tracking.tracked_order.tracked_order import OrderStatus


@tracking.aggregate
class OrderCheckpoint:
    checkpoint_id = Integer()
    tracked_order_id = Integer(required=True)
    timestamp = DateTime(required=True)
    location = String(max_length=200)
    description = String(max_length=500, default="")
    status = String(required=True, max_length=50, choices=OrderStatus)
