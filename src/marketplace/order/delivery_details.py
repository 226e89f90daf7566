"""Attach delivery details to an order after checkout."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.checkout.zones import require_landmark
from marketplace.domain import marketplace
from marketplace.identity.lookup import load_actor
from marketplace.identity.policy import authorize
from marketplace.order.lookup import get_order
from marketplace.order.order import DeliveryDetails, Order


@marketplace.command(part_of="Order")
class SetDeliveryDetails:
    """The ordering user sets where the order should go.

    Allowed while the order is Pending or Paid. The delivery fee charged at
    checkout is not recomputed.
    """

    actor_id = Identifier(required=True)
    order_id = Identifier(required=True)
    delivery_landmark = String(max_length=100)
    delivery_address = String(required=True, max_length=500)
    delivery_city = String(max_length=100)
    delivery_state = String(max_length=100)
    delivery_phone = String(max_length=30)


@marketplace.command_handler(part_of=Order)
class DeliveryDetailsHandler:
    @handle(SetDeliveryDetails)
    def set_delivery_details(self, command):
        actor = load_actor(command.actor_id)
        order = get_order(command.order_id)
        authorize(actor, "order.set_delivery", owner_id=order.user_id)

        landmark = require_landmark(command.delivery_landmark) if command.delivery_landmark else None
        order.set_delivery_details(
            DeliveryDetails(
                landmark=landmark.name if landmark else None,
                zone=landmark.zone if landmark else None,
                address=command.delivery_address,
                city=command.delivery_city,
                state=command.delivery_state,
                phone=command.delivery_phone,
            )
        )
        current_domain.repository_for(Order).add(order)
