"""Fake order lookup — a dict of known orders for testing and development."""

from tracking.lookup.port import OrderLookupPort


class FakeOrderLookup(OrderLookupPort):
    """Order lookup that answers from orders registered in memory."""

    def __init__(self):
        self.orders: dict[int, dict] = {}
        self.lookups: list[int] = []
        self.should_succeed = True
        self.failure_reason = "Order service unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Order service unavailable"):
        """Configure the fake lookup behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def register_order(self, order_id: int, buyer_id: int, **extra) -> None:
        self.orders[order_id] = {"order_id": order_id, "buyer_id": buyer_id, **extra}

    async def get_order_by_id(self, order_id: int) -> dict | None:
        self.lookups.append(order_id)
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        return self.orders.get(order_id)

    def reset(self):
        """Forget registered orders and restore default behavior."""
        self.orders.clear()
        self.lookups.clear()
        self.should_succeed = True
        self.failure_reason = "Order service unavailable"
