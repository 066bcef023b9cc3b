"""Wires the orchestrator to the configured adapters.

Settings come from the environment:

- ``NOTIFICATION_TIMEOUT_SECONDS``: upper bound on a single notification
  attempt (default 5 seconds).
- ``TRACKING_SERIALIZE_PER_ORDER``: "true" to run mutating operations on the
  same tracked order one at a time.

Adapter selection lives with each port (``TRACKING_PERSISTENCE``,
``ORDER_LOOKUP_ADAPTER``, ``NOTIFICATION_GATEWAY``).
"""

import os

from tracking.gateway import get_notification_gateway
from tracking.lookup import get_order_lookup
from tracking.persistence import get_persistence
from tracking.tracked_order.ledger import CheckpointLedger
from tracking.tracked_order.orchestrator import DEFAULT_NOTIFICATION_TIMEOUT, TrackedOrderOrchestrator
from tracking.tracked_order.store import TrackedOrderStore

_TRUTHY = {"1", "true", "yes", "on"}

_service_instance = None


def notification_timeout_from_env() -> float:
    raw = os.environ.get("NOTIFICATION_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_NOTIFICATION_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError as e:
        raise ValueError(f"NOTIFICATION_TIMEOUT_SECONDS must be a number, got {raw!r}") from e
    if timeout <= 0:
        raise ValueError(f"NOTIFICATION_TIMEOUT_SECONDS must be positive, got {raw!r}")
    return timeout


def serialize_per_order_from_env() -> bool:
    return os.environ.get("TRACKING_SERIALIZE_PER_ORDER", "false").strip().lower() in _TRUTHY


def build_tracking_service(persistence=None, order_lookup=None, gateway=None) -> TrackedOrderOrchestrator:
    """Build an orchestrator, falling back to the configured adapters."""
    persistence = persistence or get_persistence()
    return TrackedOrderOrchestrator(
        store=TrackedOrderStore(persistence),
        ledger=CheckpointLedger(persistence),
        order_lookup=order_lookup or get_order_lookup(),
        gateway=gateway or get_notification_gateway(),
        notification_timeout=notification_timeout_from_env(),
        serialize_per_order=serialize_per_order_from_env(),
    )


def get_tracking_service() -> TrackedOrderOrchestrator:
    """Return the shared orchestrator (singleton)."""
    global _service_instance
    if _service_instance is None:
        _service_instance = build_tracking_service()
    return _service_instance


def reset_tracking_service():
    """Reset the orchestrator singleton (useful for testing)."""
    global _service_instance
    _service_instance = None
