"""Best-effort shipping progress dispatch.

Resolves the buyer of a tracked order and asks the gateway to notify them.
Runs after the triggering write has been persisted; every failure on the way
is logged and dropped so the triggering operation still succeeds.
"""

import asyncio
from datetime import date, datetime

import structlog

from tracking.gateway.port import NotificationGatewayPort
from tracking.lookup.port import OrderLookupPort
from tracking.tracked_order.tracked_order import OrderStatus, TrackedOrder

logger = structlog.get_logger(__name__)


def delivery_datetime(estimated_delivery_date: date, now: datetime) -> datetime:
    """Date from the order, time of day from ``now``."""
    return datetime.combine(estimated_delivery_date, now.timetz())


async def notify_buyer_best_effort(
    lookup: OrderLookupPort,
    gateway: NotificationGatewayPort,
    order: TrackedOrder,
    *,
    timeout: float,
    now: datetime,
) -> bool:
    """Send a shipping progress notification for ``order``; never raises.

    Returns:
        True if the gateway accepted the notification.
    """
    try:
        placed_order = await lookup.get_order_by_id(order.order_id)
        if placed_order is None:
            logger.info(
                "Order not found, skipping shipping progress notification",
                order_id=order.order_id,
                tracked_order_id=order.tracked_order_id,
            )
            return False

        await asyncio.wait_for(
            gateway.send_shipping_progress_notification(
                buyer_id=placed_order["buyer_id"],
                tracked_order_id=order.tracked_order_id,
                status_text=OrderStatus(order.current_status).value,
                estimated_delivery=delivery_datetime(order.estimated_delivery_date, now),
            ),
            timeout=timeout,
        )
    except Exception as e:
        logger.warning(
            "Shipping progress notification failed",
            order_id=order.order_id,
            tracked_order_id=order.tracked_order_id,
            error=str(e) or type(e).__name__,
        )
        return False

    logger.info(
        "Shipping progress notification sent",
        tracked_order_id=order.tracked_order_id,
        status=order.current_status,
    )
    return True
