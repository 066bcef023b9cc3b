"""Order lookup port — resolves an order to its buyer for notification addressing."""

from abc import ABC, abstractmethod


class OrderLookupPort(ABC):
    """Abstract interface for order lookup adapters."""

    @abstractmethod
    async def get_order_by_id(self, order_id: int) -> dict | None:
        """Fetch an order owned by the ordering context.

        Returns:
            dict with keys: order_id, buyer_id (and any others the adapter has),
            or None when the order is unknown.
        """
        ...
