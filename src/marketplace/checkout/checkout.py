"""Checkout: splits a cart into one Order per line.

All orders created by one checkout share a ``checkout_batch_id``. The
landmark's delivery fee is charged once per vendor, on that vendor's first
line. Every line is validated before anything is written, and the orders
plus the emptied cart are committed in the same unit of work: either the
whole cart becomes orders or nothing changes.

A checkout may name a payment made for this cart in advance. That payment
must cost exactly what the cart costs and is spent by the checkout that uses
it; a confirmed one places the orders directly in Paid.
"""

from uuid import uuid4

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.cart.cart import ShoppingCart
from marketplace.cart.lines import find_cart
from marketplace.catalog.menu_item import MenuItem
from marketplace.checkout.zones import require_landmark
from marketplace.domain import marketplace
from marketplace.errors import AlreadyExists, Conflict, EmptyCart, Forbidden, InvalidReference
from marketplace.identity.lookup import find_profile, load_actor
from marketplace.identity.policy import authorize
from marketplace.identity.profile import Role
from marketplace.order.lookup import orders_where
from marketplace.order.order import DeliveryDetails, Order
from marketplace.payments.payment import Payment

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class Checkout:
    actor_id = Identifier(required=True)
    delivery_landmark = String(max_length=100)
    delivery_address = String(max_length=500)
    delivery_city = String(max_length=100)
    delivery_state = String(max_length=100)
    delivery_phone = String(max_length=30)
    payment_reference = String(max_length=100)


def _validate_references(lines):
    """Every line must still point at an existing vendor and one of its products."""
    menu_repo = current_domain.repository_for(MenuItem)
    for line in lines:
        vendor = find_profile(line.vendor_id)
        if vendor is None or not vendor.has_role(Role.VENDOR):
            raise InvalidReference(
                f"Vendor {line.vendor_id} no longer exists",
                line_id=str(line.id),
                vendor_id=str(line.vendor_id),
            )
        try:
            item = menu_repo.get(str(line.product_id))
        except ObjectNotFoundError:
            item = None
        if item is None or not item.belongs_to(line.vendor_id):
            raise InvalidReference(
                f"Product {line.product_id} no longer exists",
                line_id=str(line.id),
                product_id=str(line.product_id),
            )


def _claim_payment(reference, user_id, amount) -> Payment | None:
    """The payment a checkout references, provided it can cover exactly this cart.

    A reference is good for one checkout only. A reference the marketplace never
    initialized is stamped on the orders as is; its callback pays them later.
    """
    if not reference:
        return None
    if orders_where(payment_reference=reference):
        raise AlreadyExists(f"Payment {reference} already covers another checkout", reference=reference)

    try:
        payment = current_domain.repository_for(Payment).get(reference)
    except ObjectNotFoundError:
        return None

    if str(payment.user_id) != str(user_id):
        raise Forbidden(f"Payment {reference} belongs to another user", reference=reference)
    if payment.is_claimed:
        raise AlreadyExists(f"Payment {reference} already covers another checkout", reference=reference)
    if round(payment.amount, 2) != round(amount, 2):
        raise Conflict(
            f"Payment {reference} covers {payment.amount:.2f}, but this checkout costs {amount:.2f}",
            reference=reference,
            payment_amount=payment.amount,
            checkout_amount=amount,
        )
    return payment


def _delivery_details(command):
    fields = (
        command.delivery_landmark,
        command.delivery_address,
        command.delivery_city,
        command.delivery_state,
        command.delivery_phone,
    )
    if not any(fields):
        return None, 0.0

    fee, zone, landmark_name = 0.0, None, None
    if command.delivery_landmark:
        landmark = require_landmark(command.delivery_landmark)
        fee, zone, landmark_name = landmark.fee, landmark.zone, landmark.name

    details = DeliveryDetails(
        landmark=landmark_name,
        zone=zone,
        address=command.delivery_address,
        city=command.delivery_city,
        state=command.delivery_state,
        phone=command.delivery_phone,
    )
    return details, fee


@marketplace.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        actor = load_actor(command.actor_id)
        authorize(actor, "cart.checkout", owner_id=actor.id)

        cart = find_cart(actor.id)
        if cart is None or not cart.lines:
            raise EmptyCart("Cart is empty", user_id=str(actor.id))

        delivery, vendor_fee = _delivery_details(command)
        _validate_references(cart.lines)
        vendor_count = len(cart.grouped_by_vendor())
        payment = _claim_payment(
            command.payment_reference,
            actor.id,
            round(cart.total + vendor_fee * vendor_count, 2),
        )
        paid = payment is not None and payment.is_confirmed

        checkout_batch_id = str(uuid4())
        order_repo = current_domain.repository_for(Order)
        orders = []

        for group in cart.grouped_by_vendor():
            for index, line in enumerate(group["lines"]):
                order = Order.place(
                    checkout_batch_id=checkout_batch_id,
                    user_id=str(actor.id),
                    vendor_id=str(line.vendor_id),
                    product_id=str(line.product_id),
                    product_title=line.title,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    delivery_fee=vendor_fee if index == 0 else 0.0,
                    delivery=delivery,
                    payment_reference=command.payment_reference,
                    paid=paid,
                )
                order_repo.add(order)
                orders.append(order)

        cart.clear(reason="checkout")
        current_domain.repository_for(ShoppingCart).add(cart)

        if payment is not None:
            payment.claim_for_batch(checkout_batch_id)
            current_domain.repository_for(Payment).add(payment)

        total = round(sum(order.total for order in orders), 2)
        logger.info(
            "Checkout completed",
            user_id=str(actor.id),
            checkout_batch_id=checkout_batch_id,
            order_count=len(orders),
            total=total,
            paid=paid,
        )

        return {
            "checkout_batch_id": checkout_batch_id,
            "order_ids": [str(order.id) for order in orders],
            "total": total,
        }
