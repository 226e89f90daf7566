"""Notification aggregate: one inbox entry for one recipient.

Notifications are created reactively from Order, DeliveryTask and Profile
events. There is no deduplication: every state transition produces its own
row. ``context_data`` holds JSON pointing back at what the notification is
about (order id, delivery task id, ...).
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from marketplace.domain import marketplace
from marketplace.notifications.events import NotificationCreated, NotificationRead


class NotificationType(Enum):
    ORDER_PAID = "order_paid"
    ORDER_ACCEPTED = "order_accepted"
    ORDER_CONFIRMED = "order_confirmed"
    ORDER_REJECTED = "order_rejected"
    ORDER_COMPLETED = "order_completed"
    ORDER_CANCELLED = "order_cancelled"
    ORDER_UPDATE = "order_update"
    DELIVERY_AVAILABLE = "delivery_available"
    DELIVERY_ASSIGNED = "delivery_assigned"
    DELIVERY_PICKUP = "delivery_pickup"
    DELIVERY_IN_TRANSIT = "delivery_in_transit"
    DELIVERY_DELIVERED = "delivery_delivered"
    DELIVERY_CANCELLED = "delivery_cancelled"
    RIDER_APPLICATION = "rider_application"
    RIDER_REVIEWED = "rider_reviewed"


@marketplace.aggregate
class Notification:
    recipient_id: Identifier(required=True)
    notification_type: String(choices=NotificationType, required=True)
    title: String(required=True, max_length=200)
    message: Text(required=True)
    is_read: Boolean(default=False)
    context_data: Text()  # JSON
    created_at: DateTime()
    read_at: DateTime()

    @classmethod
    def create(cls, recipient_id, notification_type, title, message, context=None):
        now = datetime.now(UTC)
        notification = cls(
            recipient_id=recipient_id,
            notification_type=notification_type,
            title=title,
            message=message,
            is_read=False,
            context_data=json.dumps(context or {}),
            created_at=now,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                notification_type=notification_type,
                created_at=now,
            )
        )
        return notification

    @property
    def context(self) -> dict:
        return json.loads(self.context_data) if self.context_data else {}

    def mark_read(self):
        """Mark as read. Reading an already read notification changes nothing."""
        if self.is_read:
            return False

        now = datetime.now(UTC)
        self.is_read = True
        self.read_at = now
        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                read_at=now,
            )
        )
        return True
