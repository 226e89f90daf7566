"""Domain events for the Order aggregate.

Each successful status transition raises exactly one of these. They carry
the user, vendor and product title so reacting handlers (notification
fan-out, delivery cascade) never have to reload the order.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """An order was created from one cart line at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    checkout_batch_id = Identifier(required=True)
    user_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_title = String(max_length=200)
    quantity = Integer(required=True)
    total = Float(required=True)
    status = String(required=True, max_length=20)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderPaid:
    """The payment covering this order was confirmed by the gateway."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_title = String(max_length=200)
    payment_reference = String(required=True, max_length=100)
    total = Float(required=True)
    paid_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderAccepted:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_title = String(max_length=200)
    accepted_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderConfirmed:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_title = String(max_length=200)
    confirmed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderRejected:
    """The vendor declined the order before accepting it."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_title = String(max_length=200)
    reason = String(max_length=500)
    rejected_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCompleted:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_title = String(max_length=200)
    completed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled by its user or its vendor."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_title = String(max_length=200)
    reason = String(max_length=500)
    cancelled_by = String(required=True, max_length=20)
    cancelled_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderDeliveryDetailsSet:
    __version__ = 1

    order_id = Identifier(required=True)
    delivery_landmark = String(max_length=100)
    delivery_address = String(max_length=500)
    delivery_city = String(max_length=100)
    delivery_state = String(max_length=100)
    delivery_phone = String(max_length=30)
