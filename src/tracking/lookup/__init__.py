"""Order lookup abstraction — pluggable access to the ordering context."""

import os

_lookup_instance = None


def get_order_lookup():
    """Return the configured order lookup adapter (singleton).

    Uses FakeOrderLookup by default. In production, configure via the
    ORDER_LOOKUP_ADAPTER environment variable.
    """
    global _lookup_instance
    if _lookup_instance is None:
        adapter = os.environ.get("ORDER_LOOKUP_ADAPTER", "fake")
        if adapter == "fake":
            from tracking.lookup.fake_adapter import FakeOrderLookup

            _lookup_instance = FakeOrderLookup()
        else:
            raise ValueError(f"Unknown order lookup adapter: {adapter}")
    return _lookup_instance


def reset_order_lookup():
    """Reset the order lookup singleton (useful for testing)."""
    global _lookup_instance
    _lookup_instance = None
