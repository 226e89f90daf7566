"""Notifications react to Order events.

Vendor decisions are reported to the user, a user's cancellation to the
vendor, and a confirmed payment to the vendor. Rejections and cancellations
are also copied to every admin.
"""

import structlog
from protean.utils.mixins import handle

from marketplace.domain import marketplace
from marketplace.notifications.helpers import fan_out, fan_out_to_admins, short_id
from marketplace.notifications.notification import Notification, NotificationType
from marketplace.order.events import (
    OrderAccepted,
    OrderCancelled,
    OrderCompleted,
    OrderConfirmed,
    OrderPaid,
    OrderPlaced,
    OrderRejected,
)
from marketplace.order.order import CancellationActor, OrderStatus

logger = structlog.get_logger(__name__)


def _context(event, status):
    return {
        "type": "order",
        "order_id": str(event.order_id),
        "order_status": status,
        "menu_item_title": event.product_title,
    }


def _notify_vendor_of_payment(event, total):
    fan_out(
        [event.vendor_id],
        NotificationType.ORDER_PAID.value,
        "New paid order",
        f"Order #{short_id(event.order_id)} for {event.product_title} has been paid (₦{total:,.2f})",
        _context(event, OrderStatus.PAID.value),
    )


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::order")
class OrderNotificationsHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        """Orders placed with an already confirmed payment reach the vendor straight away."""
        if event.status == OrderStatus.PAID.value:
            _notify_vendor_of_payment(event, event.total)

    @handle(OrderPaid)
    def on_order_paid(self, event: OrderPaid) -> None:
        _notify_vendor_of_payment(event, event.total)

    @handle(OrderAccepted)
    def on_order_accepted(self, event: OrderAccepted) -> None:
        fan_out(
            [event.user_id],
            NotificationType.ORDER_ACCEPTED.value,
            "Your order has been accepted",
            f"Your order #{short_id(event.order_id)} for {event.product_title} is being prepared",
            _context(event, OrderStatus.ACCEPTED.value),
        )

    @handle(OrderConfirmed)
    def on_order_confirmed(self, event: OrderConfirmed) -> None:
        fan_out(
            [event.user_id],
            NotificationType.ORDER_CONFIRMED.value,
            "Order confirmed",
            f"Your order #{short_id(event.order_id)} for {event.product_title} has been confirmed",
            _context(event, OrderStatus.CONFIRMED.value),
        )

    @handle(OrderCompleted)
    def on_order_completed(self, event: OrderCompleted) -> None:
        fan_out(
            [event.user_id],
            NotificationType.ORDER_COMPLETED.value,
            "Order completed",
            f"Your order #{short_id(event.order_id)} for {event.product_title} has been completed!",
            _context(event, OrderStatus.COMPLETED.value),
        )

    @handle(OrderRejected)
    def on_order_rejected(self, event: OrderRejected) -> None:
        context = _context(event, OrderStatus.REJECTED.value)
        fan_out(
            [event.user_id],
            NotificationType.ORDER_REJECTED.value,
            "Order declined",
            f"Your order #{short_id(event.order_id)} for {event.product_title} has been declined by the vendor",
            context,
        )
        fan_out_to_admins(
            NotificationType.ORDER_UPDATE.value,
            "Order rejected",
            f"Order #{short_id(event.order_id)} has been rejected by vendor.",
            context,
        )

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        context = _context(event, OrderStatus.CANCELLED.value)
        context["cancelled_by"] = event.cancelled_by

        if event.cancelled_by == CancellationActor.USER.value:
            recipients = [event.vendor_id]
            message = f"Order #{short_id(event.order_id)} for {event.product_title} was cancelled by the customer"
        elif event.cancelled_by == CancellationActor.VENDOR.value:
            recipients = [event.user_id]
            message = f"Your order #{short_id(event.order_id)} for {event.product_title} has been cancelled"
        else:
            recipients = [event.user_id, event.vendor_id]
            message = f"Order #{short_id(event.order_id)} for {event.product_title} was cancelled by an admin"

        fan_out(recipients, NotificationType.ORDER_CANCELLED.value, "Order cancelled", message, context)
        fan_out_to_admins(
            NotificationType.ORDER_UPDATE.value,
            "Order cancelled",
            f"Order #{short_id(event.order_id)} has been cancelled by {event.cancelled_by}.",
            context,
        )
