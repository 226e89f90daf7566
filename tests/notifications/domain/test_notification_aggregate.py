"""Tests for the Notification aggregate."""

import pytest
from protean.exceptions import ValidationError

from marketplace.notifications.events import NotificationCreated, NotificationRead
from marketplace.notifications.notification import Notification, NotificationType


def _notification(**overrides):
    fields = dict(
        recipient_id="vendor-1",
        notification_type=NotificationType.ORDER_PAID.value,
        title="New paid order",
        message="Order #abc has been paid",
        context={"type": "order", "order_id": "abc"},
    )
    fields.update(overrides)
    return Notification.create(**fields)


class TestCreate:
    def test_starts_unread(self):
        notification = _notification()
        assert notification.is_read is False
        assert notification.read_at is None
        assert notification.created_at is not None
        assert isinstance(notification._events[0], NotificationCreated)

    def test_context_round_trips(self):
        assert _notification().context == {"type": "order", "order_id": "abc"}

    def test_missing_context_is_empty(self):
        assert _notification(context=None).context == {}

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            _notification(notification_type="party_invite")


class TestMarkRead:
    def test_marks_once(self):
        notification = _notification()
        assert notification.mark_read() is True
        assert notification.is_read is True
        assert isinstance(notification._events[-1], NotificationRead)

    def test_second_read_changes_nothing(self):
        notification = _notification()
        notification.mark_read()
        read_at = notification.read_at
        event_count = len(notification._events)

        assert notification.mark_read() is False
        assert notification.read_at == read_at
        assert len(notification._events) == event_count
