"""FastAPI routes for the Tracking domain."""

import os
from contextlib import contextmanager

from fastapi import APIRouter, HTTPException, Response
from protean.exceptions import ValidationError

from tracking.api.schemas import (
    AddCheckpointRequest,
    CheckpointCountResponse,
    CheckpointIdResponse,
    CheckpointResponse,
    ConfigureNotificationsRequest,
    CreateTrackedOrderRequest,
    NotificationConfigResponse,
    OutcomeResponse,
    StatusResponse,
    TrackedOrderIdResponse,
    TrackedOrderResponse,
    UpdateCheckpointRequest,
    UpdateTrackedOrderDetailsRequest,
    UpdateTrackedOrderRequest,
)
from tracking.errors import (
    InvalidArgumentError,
    InvalidOperationError,
    NotFoundError,
    PersistenceError,
)
from tracking.gateway import get_notification_gateway
from tracking.gateway.fake_adapter import FakeNotificationGateway
from tracking.service import get_tracking_service
from tracking.tracked_order.checkpoint import OrderCheckpoint
from tracking.tracked_order.tracked_order import TrackedOrder
from tracking.utils.logging import bind_tracked_order


@contextmanager
def _http_errors():
    """Translate tracking errors into HTTP responses."""
    try:
        yield
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidOperationError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.messages) from e
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


def _tracked_order_response(order: TrackedOrder) -> TrackedOrderResponse:
    return TrackedOrderResponse(
        tracked_order_id=order.tracked_order_id,
        order_id=order.order_id,
        estimated_delivery_date=order.estimated_delivery_date,
        delivery_address=order.delivery_address,
        current_status=order.current_status,
    )


def _checkpoint_response(checkpoint: OrderCheckpoint) -> CheckpointResponse:
    return CheckpointResponse(
        checkpoint_id=checkpoint.checkpoint_id,
        tracked_order_id=checkpoint.tracked_order_id,
        timestamp=checkpoint.timestamp,
        location=checkpoint.location,
        description=checkpoint.description,
        status=checkpoint.status,
    )


# ---------------------------------------------------------------------------
# Tracked Order Router
# ---------------------------------------------------------------------------
tracked_order_router = APIRouter(prefix="/tracked-orders", tags=["tracked-orders"])


@tracked_order_router.post("", status_code=201, response_model=TrackedOrderIdResponse)
async def create_tracked_order(body: CreateTrackedOrderRequest) -> TrackedOrderIdResponse:
    """Start tracking a purchased order."""
    with _http_errors():
        order = TrackedOrder(
            order_id=body.order_id,
            estimated_delivery_date=body.estimated_delivery_date,
            delivery_address=body.delivery_address,
            current_status=body.current_status.value,
        )
        tracked_order_id = await get_tracking_service().create_tracked_order(order)
    return TrackedOrderIdResponse(tracked_order_id=tracked_order_id)


@tracked_order_router.get("", response_model=list[TrackedOrderResponse])
async def list_tracked_orders() -> list[TrackedOrderResponse]:
    orders = await get_tracking_service().get_all_tracked_orders()
    return [_tracked_order_response(order) for order in orders]


@tracked_order_router.get("/{tracked_order_id}", response_model=TrackedOrderResponse)
async def get_tracked_order(tracked_order_id: int) -> TrackedOrderResponse:
    bind_tracked_order(tracked_order_id)
    with _http_errors():
        order = await get_tracking_service().get_tracked_order(tracked_order_id)
    return _tracked_order_response(order)


@tracked_order_router.put("/{tracked_order_id}", response_model=StatusResponse)
async def update_tracked_order(tracked_order_id: int, body: UpdateTrackedOrderRequest) -> StatusResponse:
    """Set the delivery date and current status directly."""
    bind_tracked_order(tracked_order_id)
    with _http_errors():
        await get_tracking_service().update_tracked_order(
            tracked_order_id,
            body.estimated_delivery_date,
            body.status,
        )
    return StatusResponse(status="updated")


@tracked_order_router.put("/{tracked_order_id}/details", response_model=OutcomeResponse)
async def update_tracked_order_details(
    tracked_order_id: int, body: UpdateTrackedOrderDetailsRequest
) -> OutcomeResponse:
    """Update delivery details on behalf of the owning order."""
    bind_tracked_order(tracked_order_id, order_id=body.order_id)
    succeeded = await get_tracking_service().update_tracked_order_details(
        tracked_order_id,
        body.estimated_delivery_date,
        body.delivery_address,
        body.status,
        body.order_id,
    )
    return OutcomeResponse(succeeded=succeeded)


@tracked_order_router.delete("/{tracked_order_id}", status_code=204)
async def delete_tracked_order(tracked_order_id: int) -> Response:
    bind_tracked_order(tracked_order_id)
    if not await get_tracking_service().delete_tracked_order(tracked_order_id):
        raise HTTPException(status_code=404, detail=f"TrackedOrder {tracked_order_id} does not exist")
    return Response(status_code=204)


@tracked_order_router.post(
    "/{tracked_order_id}/checkpoints",
    status_code=201,
    response_model=CheckpointIdResponse,
)
async def add_checkpoint(tracked_order_id: int, body: AddCheckpointRequest) -> CheckpointIdResponse:
    """Record a status observation and make it the order's current status."""
    bind_tracked_order(tracked_order_id)
    with _http_errors():
        checkpoint = OrderCheckpoint(
            tracked_order_id=tracked_order_id,
            timestamp=body.timestamp,
            location=body.location,
            description=body.description,
            status=body.status.value,
        )
        checkpoint_id = await get_tracking_service().add_checkpoint(checkpoint)
    return CheckpointIdResponse(checkpoint_id=checkpoint_id)


@tracked_order_router.get("/{tracked_order_id}/checkpoints", response_model=list[CheckpointResponse])
async def list_checkpoints(tracked_order_id: int) -> list[CheckpointResponse]:
    """Checkpoint history in the order it was recorded."""
    checkpoints = await get_tracking_service().get_all_checkpoints(tracked_order_id)
    return [_checkpoint_response(c) for c in checkpoints]


@tracked_order_router.get("/{tracked_order_id}/checkpoints/latest", response_model=CheckpointResponse)
async def get_last_checkpoint(tracked_order_id: int) -> CheckpointResponse:
    service = get_tracking_service()
    with _http_errors():
        order = await service.get_tracked_order(tracked_order_id)
        checkpoint = await service.get_last_checkpoint(order)
    if checkpoint is None:
        raise HTTPException(status_code=404, detail=f"TrackedOrder {tracked_order_id} has no checkpoints")
    return _checkpoint_response(checkpoint)


@tracked_order_router.get("/{tracked_order_id}/checkpoints/count", response_model=CheckpointCountResponse)
async def count_checkpoints(tracked_order_id: int) -> CheckpointCountResponse:
    service = get_tracking_service()
    with _http_errors():
        order = await service.get_tracked_order(tracked_order_id)
        count = await service.get_number_of_checkpoints(order)
    return CheckpointCountResponse(tracked_order_id=tracked_order_id, count=count)


@tracked_order_router.put(
    "/{tracked_order_id}/checkpoints/{checkpoint_id}",
    response_model=OutcomeResponse,
)
async def update_checkpoint_for_order(
    tracked_order_id: int, checkpoint_id: int, body: UpdateCheckpointRequest
) -> OutcomeResponse:
    """Edit a checkpoint that must belong to this tracked order."""
    bind_tracked_order(tracked_order_id, checkpoint_id=checkpoint_id)
    succeeded = await get_tracking_service().update_checkpoint_for_order(
        checkpoint_id,
        body.timestamp,
        body.location,
        body.description,
        body.status,
        tracked_order_id,
    )
    return OutcomeResponse(succeeded=succeeded)


@tracked_order_router.post("/{tracked_order_id}/revert", response_model=CheckpointResponse)
async def revert_to_previous_checkpoint(tracked_order_id: int) -> CheckpointResponse:
    """Undo the latest checkpoint; at least one checkpoint always remains."""
    bind_tracked_order(tracked_order_id)
    service = get_tracking_service()
    with _http_errors():
        order = await service.get_tracked_order(tracked_order_id)
        restored = await service.revert_to_previous_checkpoint(order)
    return _checkpoint_response(restored)


@tracked_order_router.post("/{tracked_order_id}/resync", response_model=OutcomeResponse)
async def revert_to_last_checkpoint(tracked_order_id: int) -> OutcomeResponse:
    """Re-apply the latest checkpoint's status without deleting anything."""
    bind_tracked_order(tracked_order_id)
    service = get_tracking_service()
    with _http_errors():
        order = await service.get_tracked_order(tracked_order_id)
    return OutcomeResponse(succeeded=await service.revert_to_last_checkpoint(order))


@tracked_order_router.post("/notifications/configure", response_model=NotificationConfigResponse)
async def configure_notifications(body: ConfigureNotificationsRequest) -> NotificationConfigResponse:
    """Configure the FakeNotificationGateway behavior (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Notification configuration not available in production")

    gateway = get_notification_gateway()
    if not isinstance(gateway, FakeNotificationGateway):
        raise HTTPException(
            status_code=400,
            detail="Notification configuration only available for FakeNotificationGateway",
        )

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
        delay_seconds=body.delay_seconds,
    )
    return NotificationConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
        delay_seconds=gateway.delay_seconds,
    )


# ---------------------------------------------------------------------------
# Checkpoint Router
# ---------------------------------------------------------------------------
checkpoint_router = APIRouter(prefix="/checkpoints", tags=["checkpoints"])


@checkpoint_router.get("/{checkpoint_id}", response_model=CheckpointResponse)
async def get_checkpoint(checkpoint_id: int) -> CheckpointResponse:
    with _http_errors():
        checkpoint = await get_tracking_service().get_checkpoint(checkpoint_id)
    return _checkpoint_response(checkpoint)


@checkpoint_router.put("/{checkpoint_id}", response_model=StatusResponse)
async def update_checkpoint(checkpoint_id: int, body: UpdateCheckpointRequest) -> StatusResponse:
    """Edit any checkpoint; its status becomes the order's current status."""
    with _http_errors():
        await get_tracking_service().update_checkpoint(
            checkpoint_id,
            body.timestamp,
            body.location,
            body.description,
            body.status,
        )
    return StatusResponse(status="updated")


@checkpoint_router.delete("/{checkpoint_id}", status_code=204)
async def delete_checkpoint(checkpoint_id: int) -> Response:
    """Remove a checkpoint without re-syncing its order."""
    with _http_errors():
        deleted = await get_tracking_service().delete_checkpoint(checkpoint_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"OrderCheckpoint {checkpoint_id} does not exist")
    return Response(status_code=204)
