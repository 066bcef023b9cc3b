"""Application tests for editing checkpoints and reverting status history."""

from datetime import UTC, date, datetime

import pytest
from tracking.errors import InvalidArgumentError, InvalidOperationError, NotFoundError, PersistenceError
from tracking.tracked_order.checkpoint import OrderCheckpoint
from tracking.tracked_order.tracked_order import OrderStatus, TrackedOrder

DELIVERY_DATE = date(2024, 3, 8)


def _at(day, hour=9):
    return datetime(2024, 3, day, hour, 0, tzinfo=UTC)


@pytest.fixture()
async def order(orchestrator):
    order = TrackedOrder(order_id=1001, estimated_delivery_date=DELIVERY_DATE)
    await orchestrator.create_tracked_order(order)
    return order


async def _add(orchestrator, order, status, day):
    return await orchestrator.add_checkpoint(
        OrderCheckpoint(
            tracked_order_id=order.tracked_order_id,
            timestamp=_at(day),
            location="Leeds DC",
            description="scan",
            status=status.value,
        )
    )


async def _current_status(orchestrator, order):
    return (await orchestrator.get_tracked_order(order.tracked_order_id)).current_status


class TestUpdateCheckpoint:
    async def test_edited_checkpoint_status_becomes_current(self, orchestrator, order):
        first = await _add(orchestrator, order, OrderStatus.PROCESSING, 2)

        await orchestrator.update_checkpoint(first, _at(2, 10), None, "corrected", OrderStatus.SHIPPED)

        edited = await orchestrator.get_checkpoint(first)
        assert edited.status == "SHIPPED"
        assert edited.location is None
        assert await _current_status(orchestrator, order) == "SHIPPED"

    async def test_editing_an_older_checkpoint_wins_over_a_newer_one(self, orchestrator, order):
        first = await _add(orchestrator, order, OrderStatus.PROCESSING, 2)
        await _add(orchestrator, order, OrderStatus.SHIPPED, 4)

        await orchestrator.update_checkpoint(first, _at(2), "Leeds DC", "scan", OrderStatus.CANCELLED)

        assert await _current_status(orchestrator, order) == "CANCELLED"
        latest = await orchestrator.get_last_checkpoint(order)
        assert latest.status == "SHIPPED"

    async def test_edit_to_shipping_progress_notifies(self, orchestrator, order, gateway):
        first = await _add(orchestrator, order, OrderStatus.PROCESSING, 2)
        gateway.sent_notifications.clear()

        await orchestrator.update_checkpoint(first, _at(2), "Leeds DC", "scan", OrderStatus.OUT_FOR_DELIVERY)

        assert [n["status"] for n in gateway.sent_notifications] == ["OUT_FOR_DELIVERY"]

    async def test_missing_checkpoint_is_wrapped(self, orchestrator, order):
        with pytest.raises(PersistenceError, match="Error updating OrderCheckpoint"):
            await orchestrator.update_checkpoint(99, _at(2), None, "", OrderStatus.SHIPPED)


class TestUpdateCheckpointForOrder:
    async def test_owned_checkpoint_is_updated(self, orchestrator, order):
        first = await _add(orchestrator, order, OrderStatus.PROCESSING, 2)

        succeeded = await orchestrator.update_checkpoint_for_order(
            first, _at(3), "York Hub", "moved", OrderStatus.SHIPPED, order.tracked_order_id
        )

        assert succeeded is True
        assert (await orchestrator.get_checkpoint(first)).location == "York Hub"
        assert await _current_status(orchestrator, order) == "SHIPPED"

    async def test_foreign_checkpoint_is_left_alone(self, orchestrator, order):
        other = TrackedOrder(order_id=2002, estimated_delivery_date=DELIVERY_DATE)
        await orchestrator.create_tracked_order(other)
        foreign = await _add(orchestrator, other, OrderStatus.PROCESSING, 2)

        succeeded = await orchestrator.update_checkpoint_for_order(
            foreign, _at(3), "York Hub", "moved", OrderStatus.SHIPPED, order.tracked_order_id
        )

        assert succeeded is False
        assert (await orchestrator.get_checkpoint(foreign)).status == "PROCESSING"

    async def test_missing_checkpoint_is_false(self, orchestrator, order):
        assert (
            await orchestrator.update_checkpoint_for_order(
                99, _at(3), None, "", OrderStatus.SHIPPED, order.tracked_order_id
            )
            is False
        )


class TestHistoryQueries:
    async def test_last_checkpoint_uses_timestamp_not_insertion(self, orchestrator, order):
        await _add(orchestrator, order, OrderStatus.SHIPPED, 5)
        await _add(orchestrator, order, OrderStatus.PROCESSING, 3)

        latest = await orchestrator.get_last_checkpoint(order)

        assert latest.status == "SHIPPED"
        assert await orchestrator.get_number_of_checkpoints(order) == 2

    async def test_last_checkpoint_without_history(self, orchestrator, order):
        assert await orchestrator.get_last_checkpoint(order) is None
        assert await orchestrator.get_number_of_checkpoints(order) == 0

    async def test_queries_reject_missing_order(self, orchestrator):
        with pytest.raises(InvalidArgumentError):
            await orchestrator.get_last_checkpoint(None)
        with pytest.raises(InvalidArgumentError):
            await orchestrator.get_number_of_checkpoints(None)


class TestRevertToPreviousCheckpoint:
    async def test_removes_latest_and_restores_previous_status(self, orchestrator, order):
        await _add(orchestrator, order, OrderStatus.PROCESSING, 2)
        await _add(orchestrator, order, OrderStatus.SHIPPED, 3)

        restored = await orchestrator.revert_to_previous_checkpoint(order)

        assert restored.status == "PROCESSING"
        assert await orchestrator.get_number_of_checkpoints(order) == 1
        assert await _current_status(orchestrator, order) == "PROCESSING"

    async def test_keeps_the_order_delivery_date(self, orchestrator, order):
        await _add(orchestrator, order, OrderStatus.PROCESSING, 2)
        await _add(orchestrator, order, OrderStatus.SHIPPED, 3)

        await orchestrator.revert_to_previous_checkpoint(order)

        stored = await orchestrator.get_tracked_order(order.tracked_order_id)
        assert stored.estimated_delivery_date == DELIVERY_DATE

    async def test_reverting_into_shipping_progress_notifies(self, orchestrator, order, gateway):
        await _add(orchestrator, order, OrderStatus.SHIPPED, 2)
        await _add(orchestrator, order, OrderStatus.DELIVERED, 3)
        gateway.sent_notifications.clear()

        await orchestrator.revert_to_previous_checkpoint(order)

        assert [n["status"] for n in gateway.sent_notifications] == ["SHIPPED"]

    async def test_latest_is_chosen_by_timestamp(self, orchestrator, order):
        await _add(orchestrator, order, OrderStatus.DELIVERED, 6)
        await _add(orchestrator, order, OrderStatus.PROCESSING, 2)

        restored = await orchestrator.revert_to_previous_checkpoint(order)

        assert restored.status == "PROCESSING"
        remaining = await orchestrator.get_all_checkpoints(order.tracked_order_id)
        assert [c.status for c in remaining] == ["PROCESSING"]

    async def test_single_checkpoint_cannot_be_reverted(self, orchestrator, order):
        await _add(orchestrator, order, OrderStatus.PROCESSING, 2)

        with pytest.raises(InvalidOperationError, match="Cannot revert further"):
            await orchestrator.revert_to_previous_checkpoint(order)
        assert await orchestrator.get_number_of_checkpoints(order) == 1
        assert await _current_status(orchestrator, order) == "PROCESSING"

    async def test_empty_history_cannot_be_reverted(self, orchestrator, order):
        with pytest.raises(InvalidOperationError, match="Cannot revert further"):
            await orchestrator.revert_to_previous_checkpoint(order)
        assert await _current_status(orchestrator, order) == "PENDING"

    async def test_failed_delete_is_reported(self, orchestrator, order, persistence):
        await _add(orchestrator, order, OrderStatus.PROCESSING, 2)
        await _add(orchestrator, order, OrderStatus.SHIPPED, 3)
        persistence.configure(should_succeed=False)

        with pytest.raises(InvalidOperationError, match="Failed to delete the current checkpoint"):
            await orchestrator.revert_to_previous_checkpoint(order)
        assert await _current_status(orchestrator, order) == "SHIPPED"
        assert await orchestrator.get_number_of_checkpoints(order) == 2

    async def test_history_emptied_mid_revert_is_reported(self, orchestrator, order, persistence, monkeypatch):
        await _add(orchestrator, order, OrderStatus.PROCESSING, 2)
        await _add(orchestrator, order, OrderStatus.SHIPPED, 3)
        delete_checkpoint = persistence.delete_checkpoint

        async def delete_and_clear(checkpoint_id):
            rows = await delete_checkpoint(checkpoint_id)
            persistence.checkpoints.clear()
            return rows

        monkeypatch.setattr(persistence, "delete_checkpoint", delete_and_clear)

        with pytest.raises(InvalidOperationError, match="No checkpoints found to revert"):
            await orchestrator.revert_to_previous_checkpoint(order)
        assert await _current_status(orchestrator, order) == "SHIPPED"

    async def test_missing_order_is_rejected(self, orchestrator):
        with pytest.raises(InvalidArgumentError):
            await orchestrator.revert_to_previous_checkpoint(None)


class TestRevertToLastCheckpoint:
    async def test_resyncs_status_without_deleting(self, orchestrator, order):
        await _add(orchestrator, order, OrderStatus.PROCESSING, 2)
        await _add(orchestrator, order, OrderStatus.SHIPPED, 3)
        await orchestrator.update_tracked_order(order.tracked_order_id, DELIVERY_DATE, OrderStatus.CANCELLED)

        assert await orchestrator.revert_to_last_checkpoint(order) is True

        assert await _current_status(orchestrator, order) == "SHIPPED"
        assert await orchestrator.get_number_of_checkpoints(order) == 2

    async def test_without_history_is_false(self, orchestrator, order):
        assert await orchestrator.revert_to_last_checkpoint(order) is False

    async def test_missing_order_is_false(self, orchestrator):
        assert await orchestrator.revert_to_last_checkpoint(None) is False

    async def test_persistence_failure_is_false(self, orchestrator, order, persistence):
        await _add(orchestrator, order, OrderStatus.PROCESSING, 2)
        persistence.configure(should_succeed=False)

        assert await orchestrator.revert_to_last_checkpoint(order) is False


async def test_missing_tracked_order_read_is_not_found(orchestrator):
    with pytest.raises(NotFoundError):
        await orchestrator.get_tracked_order(404)
