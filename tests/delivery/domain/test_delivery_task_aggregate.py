"""Tests for the DeliveryTask aggregate and its state machine."""

import pytest
from protean.exceptions import ValidationError

from marketplace.delivery.events import (
    DeliveryTaskAssigned,
    DeliveryTaskCancelled,
    DeliveryTaskCreated,
    DeliveryTaskDelivered,
    DeliveryTaskInTransit,
    DeliveryTaskPickedUp,
)
from marketplace.delivery.task import DeliveryStatus, DeliveryTask
from marketplace.errors import Forbidden, InvalidTransition


def _task():
    return DeliveryTask.dispatch(
        order_id="order-1",
        vendor_id="vendor-1",
        user_id="user-1",
        delivery_address="4 Hospital Road, Yenagoa",
        pickup_address="9 Azikoro Road",
    )


class TestDispatch:
    def test_starts_pending_without_rider(self):
        task = _task()
        assert task.status == DeliveryStatus.PENDING.value
        assert task.rider_id is None
        assert isinstance(task._events[0], DeliveryTaskCreated)

    def test_delivery_address_required(self):
        with pytest.raises(ValidationError):
            DeliveryTask.dispatch(order_id="o", vendor_id="v", user_id="u", delivery_address=None)

    def test_assigned_task_needs_a_rider(self):
        with pytest.raises(ValidationError):
            DeliveryTask(
                order_id="o",
                vendor_id="v",
                user_id="u",
                delivery_address="x",
                status=DeliveryStatus.ASSIGNED.value,
            )


class TestRiderFlow:
    def test_full_run(self):
        task = _task()
        task.assign("rider-1")
        task.advance("rider-1", "Picked_Up")
        task.advance("rider-1", "In_Transit")
        task.advance("rider-1", "Delivered")

        assert task.status == DeliveryStatus.DELIVERED.value
        assert [type(e) for e in task._events[1:]] == [
            DeliveryTaskAssigned,
            DeliveryTaskPickedUp,
            DeliveryTaskInTransit,
            DeliveryTaskDelivered,
        ]
        assert task.delivered_at is not None

    def test_cannot_skip_steps(self):
        task = _task()
        task.assign("rider-1")
        with pytest.raises(InvalidTransition):
            task.advance("rider-1", "Delivered")
        assert task.status == DeliveryStatus.ASSIGNED.value

    def test_delivered_from_pending_is_invalid(self):
        task = _task()
        with pytest.raises(InvalidTransition):
            task.advance("rider-1", "Delivered")
        assert task.status == DeliveryStatus.PENDING.value

    def test_only_the_holder_advances(self):
        task = _task()
        task.assign("rider-1")
        with pytest.raises(Forbidden):
            task.advance("rider-2", "Picked_Up")

    def test_cannot_assign_twice(self):
        task = _task()
        task.assign("rider-1")
        with pytest.raises(InvalidTransition):
            task.assign("rider-2")
        assert task.rider_id == "rider-1"

    @pytest.mark.parametrize("target", ["Assigned", "Cancelled", "Pending", "Lost"])
    def test_riders_only_report_progress(self, target):
        task = _task()
        task.assign("rider-1")
        with pytest.raises(InvalidTransition):
            task.advance("rider-1", target)


class TestCancel:
    def test_cancel_pending(self):
        task = _task()
        assert task.cancel("Order rejected") is True
        assert task.status == DeliveryStatus.CANCELLED.value
        event = task._events[-1]
        assert isinstance(event, DeliveryTaskCancelled)
        assert event.rider_id is None

    def test_cancel_in_transit_tells_rider(self):
        task = _task()
        task.assign("rider-1")
        task.advance("rider-1", "Picked_Up")
        task.advance("rider-1", "In_Transit")
        assert task.cancel("Order cancelled") is True
        assert task._events[-1].rider_id == "rider-1"

    def test_delivered_is_never_cancelled(self):
        task = _task()
        task.assign("rider-1")
        for step in ("Picked_Up", "In_Transit", "Delivered"):
            task.advance("rider-1", step)
        assert task.cancel("too late") is False
        assert task.status == DeliveryStatus.DELIVERED.value

    def test_cancel_twice(self):
        task = _task()
        task.cancel()
        assert task.cancel() is False
