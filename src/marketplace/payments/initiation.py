"""Payment initiation: opens a hosted checkout with the gateway.

Two flavours:
- pay for a checkout batch: sums the batch's Pending orders and stamps the
  new reference on each of them, so the confirmation callback can find them;
- prepay the current cart: sums the cart (plus the landmark's delivery fee
  once per vendor). Checking out with that reference after confirmation
  creates the orders directly in Paid.

A charge covering a single vendor with a gateway subaccount settles straight
to that vendor, the gateway keeping the platform share as its transaction
charge. Charges spanning several vendors are collected by the platform whole.
"""

import os

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.cart.lines import find_cart
from marketplace.checkout.zones import require_landmark
from marketplace.domain import marketplace
from marketplace.errors import EmptyCart, NotFound
from marketplace.identity.lookup import find_profile, load_actor
from marketplace.identity.policy import authorize
from marketplace.identity.profile import Role
from marketplace.order.lookup import orders_where
from marketplace.order.order import Order, OrderStatus
from marketplace.payments.gateway import get_gateway
from marketplace.payments.payment import Payment, new_reference, split_charge

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Payment")
class InitializePayment:
    actor_id = Identifier(required=True)
    checkout_batch_id = Identifier()
    delivery_landmark = String(max_length=100)
    email = String(max_length=254)
    callback_url = String(max_length=1000)


def _batch_charge(actor, checkout_batch_id, reference):
    orders = [
        order
        for order in orders_where(checkout_batch_id=str(checkout_batch_id), status=OrderStatus.PENDING.value)
        if str(order.user_id) == str(actor.id)
    ]
    if not orders:
        raise NotFound(
            f"No pending orders in checkout batch {checkout_batch_id}",
            checkout_batch_id=str(checkout_batch_id),
        )

    order_repo = current_domain.repository_for(Order)
    for order in orders:
        order.attach_payment_reference(reference)
        order_repo.add(order)

    split = split_charge(
        food_amount=sum(order.subtotal for order in orders),
        delivery_fee=sum(order.delivery_fee or 0.0 for order in orders),
    )
    return split, {str(order.vendor_id) for order in orders}


def _cart_charge(actor, delivery_landmark):
    cart = find_cart(actor.id)
    if cart is None or not cart.lines:
        raise EmptyCart("Cart is empty", user_id=str(actor.id))

    groups = cart.grouped_by_vendor()
    fee = require_landmark(delivery_landmark).fee if delivery_landmark else 0.0
    split = split_charge(food_amount=cart.total, delivery_fee=fee * len(groups))
    return split, {group["vendor_id"] for group in groups}


def _settlement_subaccount(vendor_ids) -> str | None:
    if len(vendor_ids) != 1:
        return None
    vendor = find_profile(next(iter(vendor_ids)))
    if vendor is None or not vendor.has_role(Role.VENDOR):
        return None
    return vendor.subaccount_code


@marketplace.command_handler(part_of=Payment)
class InitializePaymentHandler:
    @handle(InitializePayment)
    def initialize_payment(self, command):
        actor = load_actor(command.actor_id)
        authorize(actor, "payment.initialize", owner_id=actor.id)

        email = command.email or actor.email
        if not email:
            raise ValidationError({"email": ["An email address is required to pay"]})

        reference = new_reference()
        if command.checkout_batch_id:
            split, vendor_ids = _batch_charge(actor, command.checkout_batch_id, reference)
        else:
            split, vendor_ids = _cart_charge(actor, command.delivery_landmark)
        amount = split.total
        subaccount = _settlement_subaccount(vendor_ids)

        result = get_gateway().initialize_transaction(
            reference=reference,
            amount=amount,
            email=email,
            callback_url=command.callback_url or os.getenv("PAYMENT_CALLBACK_URL"),
            metadata={
                "user_id": str(actor.id),
                "checkout_batch_id": str(command.checkout_batch_id) if command.checkout_batch_id else None,
                "vendor_ids": sorted(vendor_ids),
                **split.as_metadata(),
            },
            subaccount=subaccount,
            transaction_charge=split.platform_share_amount if subaccount else None,
        )
        if not result.success:
            logger.warning(
                "Gateway refused to initialize payment",
                reference=reference,
                user_id=str(actor.id),
                reason=result.failure_reason,
            )
            raise ValidationError({"payment": [result.failure_reason or "Payment could not be initialized"]})

        payment = Payment.initialize(
            reference=reference,
            user_id=str(actor.id),
            amount=amount,
            checkout_batch_id=str(command.checkout_batch_id) if command.checkout_batch_id else None,
            authorization_url=result.authorization_url,
            split=split,
            subaccount_code=subaccount,
        )
        current_domain.repository_for(Payment).add(payment)

        logger.info(
            "Payment initialized",
            reference=reference,
            user_id=str(actor.id),
            checkout_batch_id=command.checkout_batch_id,
            amount=amount,
            platform_share=split.platform_share_amount,
            settles_to_vendor=subaccount is not None,
        )
        return {
            "reference": reference,
            "authorization_url": result.authorization_url,
            "amount": amount,
        }
