"""Delivery reacts to Order events.

An order that is cancelled or rejected takes its delivery task with it,
unless the food has already been delivered.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from marketplace.delivery.lookup import task_for_order
from marketplace.delivery.task import DeliveryTask
from marketplace.domain import marketplace
from marketplace.order.events import OrderCancelled, OrderRejected

logger = structlog.get_logger(__name__)


def _cancel_task_for(order_id, reason):
    task = task_for_order(order_id)
    if task is None:
        return

    if task.cancel(reason):
        current_domain.repository_for(DeliveryTask).add(task)
        logger.info("Delivery task cancelled with its order", delivery_task_id=str(task.id), order_id=str(order_id))
    else:
        logger.info(
            "Delivery task left as is",
            delivery_task_id=str(task.id),
            order_id=str(order_id),
            status=task.status,
        )


@marketplace.event_handler(part_of=DeliveryTask, stream_category="marketplace::order")
class OrderEventsHandler:
    """Keeps delivery tasks in step with their orders."""

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        _cancel_task_for(event.order_id, event.reason or f"Order cancelled by {event.cancelled_by}")

    @handle(OrderRejected)
    def on_order_rejected(self, event: OrderRejected) -> None:
        _cancel_task_for(event.order_id, event.reason or "Order rejected by vendor")
