"""Domain events for the Payment aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Payment")
class PaymentInitialized:
    """A hosted checkout was opened with the gateway."""

    __version__ = 1

    reference = String(required=True, max_length=100)
    user_id = Identifier(required=True)
    checkout_batch_id = Identifier()
    amount = Float(required=True)
    currency = String(max_length=3, default="NGN")
    platform_share_amount = Float()
    initialized_at = DateTime(required=True)


@marketplace.event(part_of="Payment")
class PaymentConfirmed:
    """The gateway verified the payment; covered orders move to Paid."""

    __version__ = 1

    reference = String(required=True, max_length=100)
    user_id = Identifier(required=True)
    checkout_batch_id = Identifier()
    amount = Float(required=True)
    gateway_transaction_id = String(max_length=255)
    orders_paid = Integer(default=0)
    confirmed_at = DateTime(required=True)


@marketplace.event(part_of="Payment")
class PaymentFailed:
    __version__ = 1

    reference = String(required=True, max_length=100)
    user_id = Identifier(required=True)
    reason = String(max_length=500)
    failed_at = DateTime(required=True)
