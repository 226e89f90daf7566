"""Delivery task creation: a vendor dispatches one of its paid orders."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.delivery.lookup import task_for_order, tasks_where
from marketplace.delivery.task import DeliveryTask
from marketplace.domain import marketplace
from marketplace.errors import AlreadyExists, Forbidden, InvalidTransition, MissingAddress
from marketplace.identity.lookup import get_profile, load_actor
from marketplace.identity.policy import authorize
from marketplace.order.lookup import get_order
from marketplace.order.order import DISPATCHABLE_STATES, Order, OrderStatus


@marketplace.command(part_of="DeliveryTask")
class CreateDeliveryTask:
    actor_id = Identifier(required=True)
    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)


def _assert_dispatchable(order: Order):
    # A vendor may accept an order before it is paid; that order still cannot ship
    if OrderStatus(order.status) not in DISPATCHABLE_STATES or order.paid_at is None:
        raise InvalidTransition(
            f"Order is {order.status} and has not been paid; only paid orders can be dispatched",
            order_id=str(order.id),
            current_status=order.status,
            paid=order.paid_at is not None,
        )


def _next_pickup_sequence(payment_reference) -> int | None:
    """Stops paid together are picked up in the order they were dispatched."""
    if not payment_reference:
        return None
    return len(tasks_where(payment_reference=payment_reference)) + 1


@marketplace.command_handler(part_of=DeliveryTask)
class CreateDeliveryTaskHandler:
    @handle(CreateDeliveryTask)
    def create_delivery_task(self, command):
        actor = load_actor(command.actor_id)
        order = get_order(command.order_id)

        if str(order.vendor_id) != str(command.vendor_id):
            raise Forbidden("Order does not belong to this vendor", order_id=str(order.id))
        authorize(actor, "delivery.create", owner_id=order.vendor_id)

        _assert_dispatchable(order)

        if task_for_order(order.id) is not None:
            raise AlreadyExists(f"Order {order.id} already has a delivery task", order_id=str(order.id))

        delivery_address = order.delivery_address
        if not delivery_address:
            raise MissingAddress(f"Order {order.id} has no delivery address", order_id=str(order.id))

        vendor = get_profile(order.vendor_id)
        task = DeliveryTask.dispatch(
            order_id=str(order.id),
            vendor_id=str(order.vendor_id),
            user_id=str(order.user_id),
            delivery_address=delivery_address,
            pickup_address=vendor.pickup_address,
            vendor_location=vendor.location,
            delivery_phone=order.delivery.phone if order.delivery else None,
            payment_reference=order.payment_reference,
            pickup_sequence=_next_pickup_sequence(order.payment_reference),
        )
        current_domain.repository_for(DeliveryTask).add(task)
        return {"id": str(task.id), "order_id": str(order.id), "status": task.status}
