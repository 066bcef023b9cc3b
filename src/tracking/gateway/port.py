"""Notification gateway port — asks the notification service to tell a buyer about shipping progress."""

from abc import ABC, abstractmethod
from datetime import datetime


class NotificationGatewayPort(ABC):
    """Abstract interface for notification gateway adapters."""

    @abstractmethod
    async def send_shipping_progress_notification(
        self,
        buyer_id: int,
        tracked_order_id: int,
        status_text: str,
        estimated_delivery: datetime,
    ) -> dict:
        """Request a shipping progress notification for a buyer.

        Returns:
            dict with keys: notification_id, status ("sent")

        Raises:
            Any exception when the notification service rejects the request.
        """
        ...
