"""Notifications react to DeliveryTask events."""

from protean.utils.mixins import handle

from marketplace.delivery.events import (
    DeliveryTaskAssigned,
    DeliveryTaskCancelled,
    DeliveryTaskCreated,
    DeliveryTaskDelivered,
    DeliveryTaskInTransit,
    DeliveryTaskPickedUp,
)
from marketplace.domain import marketplace
from marketplace.identity.lookup import approved_rider_ids
from marketplace.notifications.helpers import fan_out, short_id
from marketplace.notifications.notification import Notification, NotificationType


def _context(event, status):
    return {
        "type": "delivery",
        "delivery_task_id": str(event.delivery_task_id),
        "order_id": str(event.order_id),
        "delivery_status": status,
    }


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::delivery_task")
class DeliveryNotificationsHandler:
    @handle(DeliveryTaskCreated)
    def on_task_created(self, event: DeliveryTaskCreated) -> None:
        """Every approved rider hears about a new task up for grabs."""
        fan_out(
            approved_rider_ids(),
            NotificationType.DELIVERY_AVAILABLE.value,
            "New delivery available",
            f"A delivery from {event.pickup_address or 'a vendor'} to {event.delivery_address} is waiting for a rider",
            _context(event, "Pending"),
        )

    @handle(DeliveryTaskAssigned)
    def on_task_assigned(self, event: DeliveryTaskAssigned) -> None:
        context = _context(event, "Assigned")
        fan_out(
            [event.vendor_id],
            NotificationType.DELIVERY_ASSIGNED.value,
            "Rider assigned",
            f"A rider is on the way to collect order #{short_id(event.order_id)}",
            context,
        )
        fan_out(
            [event.user_id],
            NotificationType.DELIVERY_ASSIGNED.value,
            "Rider assigned",
            f"A rider has been assigned to your order #{short_id(event.order_id)}",
            context,
        )

    @handle(DeliveryTaskPickedUp)
    def on_task_picked_up(self, event: DeliveryTaskPickedUp) -> None:
        context = _context(event, "Picked_Up")
        fan_out(
            [event.vendor_id],
            NotificationType.DELIVERY_PICKUP.value,
            "Order picked up",
            f"Order #{short_id(event.order_id)} has been picked up by the rider",
            context,
        )
        fan_out(
            [event.user_id],
            NotificationType.DELIVERY_PICKUP.value,
            "Order picked up",
            f"Your order #{short_id(event.order_id)} has been picked up",
            context,
        )

    @handle(DeliveryTaskInTransit)
    def on_task_in_transit(self, event: DeliveryTaskInTransit) -> None:
        fan_out(
            [event.user_id],
            NotificationType.DELIVERY_IN_TRANSIT.value,
            "Order on the way",
            f"Your order #{short_id(event.order_id)} is on its way",
            _context(event, "In_Transit"),
        )

    @handle(DeliveryTaskDelivered)
    def on_task_delivered(self, event: DeliveryTaskDelivered) -> None:
        context = _context(event, "Delivered")
        fan_out(
            [event.user_id],
            NotificationType.DELIVERY_DELIVERED.value,
            "Order delivered",
            f"Your order #{short_id(event.order_id)} has been delivered. Enjoy!",
            context,
        )
        fan_out(
            [event.vendor_id],
            NotificationType.DELIVERY_DELIVERED.value,
            "Order delivered",
            f"Order #{short_id(event.order_id)} has been delivered to the customer",
            context,
        )

    @handle(DeliveryTaskCancelled)
    def on_task_cancelled(self, event: DeliveryTaskCancelled) -> None:
        if not event.rider_id:
            return
        fan_out(
            [event.rider_id],
            NotificationType.DELIVERY_CANCELLED.value,
            "Delivery cancelled",
            f"The delivery for order #{short_id(event.order_id)} has been cancelled",
            _context(event, "Cancelled"),
        )
