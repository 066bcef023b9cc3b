"""Tracking domain API package."""

from tracking.api.routes import checkpoint_router, tracked_order_router

__all__ = ["tracked_order_router", "checkpoint_router"]
