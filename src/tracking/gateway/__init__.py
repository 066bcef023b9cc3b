"""Notification gateway abstraction — pluggable access to the notification service."""

import os

_gateway_instance = None


def get_notification_gateway():
    """Return the configured notification gateway (singleton).

    Uses FakeNotificationGateway by default. In production, configure via the
    NOTIFICATION_GATEWAY environment variable.
    """
    global _gateway_instance
    if _gateway_instance is None:
        adapter = os.environ.get("NOTIFICATION_GATEWAY", "fake")
        if adapter == "fake":
            from tracking.gateway.fake_adapter import FakeNotificationGateway

            _gateway_instance = FakeNotificationGateway()
        else:
            raise ValueError(f"Unknown notification gateway: {adapter}")
    return _gateway_instance


def reset_notification_gateway():
    """Reset the gateway singleton (useful for testing)."""
    global _gateway_instance
    _gateway_instance = None
