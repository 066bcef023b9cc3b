"""Fake notification gateway — records rendered notifications for testing."""

import asyncio
from datetime import datetime
from uuid import uuid4

from tracking.gateway.port import NotificationGatewayPort
from tracking.gateway.template import ShippingProgressTemplate


class FakeNotificationGateway(NotificationGatewayPort):
    """Gateway that keeps notifications in memory for test assertions."""

    def __init__(self):
        self.sent_notifications: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification service unavailable"
        self.delay_seconds = 0.0

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Notification service unavailable",
        delay_seconds: float = 0.0,
    ):
        """Configure the fake gateway behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.delay_seconds = delay_seconds

    async def send_shipping_progress_notification(
        self,
        buyer_id: int,
        tracked_order_id: int,
        status_text: str,
        estimated_delivery: datetime,
    ) -> dict:
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)

        rendered = ShippingProgressTemplate.render(
            {
                "tracked_order_id": tracked_order_id,
                "status": status_text,
                "estimated_delivery": estimated_delivery.isoformat(),
            }
        )
        notification_id = f"notif-{uuid4().hex[:12]}"
        self.sent_notifications.append(
            {
                "notification_id": notification_id,
                "buyer_id": buyer_id,
                "tracked_order_id": tracked_order_id,
                "status": status_text,
                "estimated_delivery": estimated_delivery,
                **rendered,
            }
        )
        return {"notification_id": notification_id, "status": "sent"}

    def reset(self):
        """Clear sent notifications (useful between tests)."""
        self.sent_notifications.clear()
        self.should_succeed = True
        self.failure_reason = "Notification service unavailable"
        self.delay_seconds = 0.0
