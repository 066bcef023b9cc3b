"""Identity sequences for tracked orders and checkpoints.

Each sequence only ever moves forward, so an identity is never handed out
twice, not even after the record holding it is deleted.
"""

from protean.fields import Integer, String

from tracking.domain import tracking

TRACKED_ORDER_SEQUENCE = "tracked_order"
CHECKPOINT_SEQUENCE = "order_checkpoint"


@tracking.aggregate
class IdentitySequence:
    name = String(identifier=True, required=True, max_length=50)
    last_value = Integer(default=0)

    def advance(self) -> int:
        self.last_value = (self.last_value or 0) + 1
        return self.last_value
