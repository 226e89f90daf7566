"""Order status transitions requested by vendors and users.

The caller may pass the status it last saw as ``expected_status``. When the
stored status has moved on the request fails with Conflict, so two racing
requests (say Accept and Reject) cannot both succeed.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import Forbidden
from marketplace.identity.lookup import load_actor
from marketplace.identity.policy import authorize
from marketplace.identity.profile import Role
from marketplace.order.lookup import get_order
from marketplace.order.order import CancellationActor, Order, OrderStatus


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    """A vendor moves one of its orders along the lifecycle."""

    actor_id = Identifier(required=True)
    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    new_status = String(required=True, choices=OrderStatus)
    expected_status = String(choices=OrderStatus)
    reason = String(max_length=500)


@marketplace.command(part_of="Order")
class CancelOrder:
    actor_id = Identifier(required=True)
    order_id = Identifier(required=True)
    expected_status = String(choices=OrderStatus)
    reason = String(max_length=500)


@marketplace.command_handler(part_of=Order)
class OrderTransitionsHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        actor = load_actor(command.actor_id)
        order = get_order(command.order_id)

        if str(order.vendor_id) != str(command.vendor_id):
            raise Forbidden("Order does not belong to this vendor", order_id=str(order.id))
        authorize(actor, "order.vendor_transition", owner_id=order.vendor_id)

        order.assert_status(command.expected_status)
        order.transition_by_vendor(command.new_status, reason=command.reason)
        current_domain.repository_for(Order).add(order)
        return order.status

    @handle(CancelOrder)
    def cancel(self, command):
        actor = load_actor(command.actor_id)
        order = get_order(command.order_id)

        if str(actor.id) == str(order.vendor_id):
            cancelled_by, owner_id = CancellationActor.VENDOR.value, order.vendor_id
        elif str(actor.id) == str(order.user_id):
            cancelled_by, owner_id = CancellationActor.USER.value, order.user_id
        elif actor.has_role(Role.ADMIN):
            cancelled_by, owner_id = CancellationActor.ADMIN.value, None
        else:
            raise Forbidden("Only the order's user or vendor may cancel it", order_id=str(order.id))
        authorize(actor, "order.cancel", owner_id=owner_id)

        order.assert_status(command.expected_status)
        order.cancel(cancelled_by, reason=command.reason)
        current_domain.repository_for(Order).add(order)
        return order.status
