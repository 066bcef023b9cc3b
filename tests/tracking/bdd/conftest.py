"""Shared BDD fixtures and step definitions for the Tracking domain."""

import asyncio
from datetime import UTC, date, datetime

import pytest
from pytest_bdd import given, parsers, then, when
from tracking.tracked_order.checkpoint import OrderCheckpoint
from tracking.tracked_order.tracked_order import TrackedOrder


@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


@pytest.fixture()
def recorded():
    """Checkpoint ids in the order they were recorded."""
    return []


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a tracked order for order {order_id:d} delivering on "{delivery_date}"'),
    target_fixture="order",
)
def tracked_order(orchestrator, order_id, delivery_date):
    order = TrackedOrder(order_id=order_id, estimated_delivery_date=date.fromisoformat(delivery_date))
    asyncio.run(orchestrator.create_tracked_order(order))
    return order


@given(parsers.cfparse('a "{status}" checkpoint is recorded on day {day:d}'))
@when(parsers.cfparse('a "{status}" checkpoint is recorded on day {day:d}'))
def record_checkpoint(orchestrator, order, recorded, status, day):
    checkpoint = OrderCheckpoint(
        tracked_order_id=order.tracked_order_id,
        timestamp=datetime(2024, 3, day, 9, 0, tzinfo=UTC),
        location="Leeds DC",
        description=f"{status} scan",
        status=status,
    )
    recorded.append(asyncio.run(orchestrator.add_checkpoint(checkpoint)))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the current status is "{status}"'))
def current_status_is(orchestrator, order, status):
    stored = asyncio.run(orchestrator.get_tracked_order(order.tracked_order_id))
    assert stored.current_status == status


@then(parsers.cfparse("the order has {count:d} checkpoints"))
def checkpoint_count(orchestrator, order, count):
    assert asyncio.run(orchestrator.get_number_of_checkpoints(order)) == count
