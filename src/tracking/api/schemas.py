"""Pydantic API schemas for the Tracking domain.

These are the external API contracts for the control page and the buyer's
tracking page. The routes translate between them and the orchestrator.
"""

from datetime import date, datetime

from pydantic import BaseModel

from tracking.tracked_order.tracked_order import OrderStatus


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class CreateTrackedOrderRequest(BaseModel):
    order_id: int
    estimated_delivery_date: date
    delivery_address: str | None = None
    current_status: OrderStatus = OrderStatus.PENDING


class UpdateTrackedOrderRequest(BaseModel):
    estimated_delivery_date: date
    status: OrderStatus


class UpdateTrackedOrderDetailsRequest(BaseModel):
    estimated_delivery_date: date
    delivery_address: str
    status: OrderStatus
    order_id: int


class AddCheckpointRequest(BaseModel):
    timestamp: datetime
    location: str | None = None
    description: str = ""
    status: OrderStatus


class UpdateCheckpointRequest(BaseModel):
    timestamp: datetime
    location: str | None = None
    description: str = ""
    status: OrderStatus


class ConfigureNotificationsRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Notification service unavailable"
    delay_seconds: float = 0.0


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class TrackedOrderIdResponse(BaseModel):
    tracked_order_id: int


class CheckpointIdResponse(BaseModel):
    checkpoint_id: int


class TrackedOrderResponse(BaseModel):
    tracked_order_id: int
    order_id: int
    estimated_delivery_date: date
    delivery_address: str | None = None
    current_status: str


class CheckpointResponse(BaseModel):
    checkpoint_id: int
    tracked_order_id: int
    timestamp: datetime
    location: str | None = None
    description: str | None = None
    status: str


class CheckpointCountResponse(BaseModel):
    tracked_order_id: int
    count: int


class StatusResponse(BaseModel):
    status: str


class OutcomeResponse(BaseModel):
    succeeded: bool


class NotificationConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str
    delay_seconds: float
