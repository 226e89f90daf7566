"""Payment aggregate: one gateway transaction, keyed by its reference.

The payment reference is the aggregate's identity, which makes this record
the single place where callback idempotency is decided: once a Payment is
Confirmed, every later callback for the same reference is a no-op.

State Machine:
    INITIALIZED → CONFIRMED
    INITIALIZED → FAILED → CONFIRMED   (a later callback may still succeed)

Every charge is split: the platform keeps a commission on the food amount
plus the whole delivery fee and any VAT; the rest settles to the vendor.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.fields import DateTime, Float, Identifier, String, ValueObject

from marketplace.domain import marketplace
from marketplace.errors import InvalidTransition
from marketplace.payments.events import PaymentConfirmed, PaymentFailed, PaymentInitialized


class PaymentStatus(Enum):
    INITIALIZED = "Initialized"
    CONFIRMED = "Confirmed"
    FAILED = "Failed"


_VALID_TRANSITIONS = {
    PaymentStatus.INITIALIZED: {PaymentStatus.CONFIRMED, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.CONFIRMED, PaymentStatus.FAILED},
    PaymentStatus.CONFIRMED: set(),  # Terminal
}


COMMISSION_RATE = 0.10


def new_reference() -> str:
    return f"MKT-{uuid4().hex[:20].upper()}"


@marketplace.value_object(part_of="Payment")
class ChargeSplit:
    food_amount = Float(required=True, min_value=0.0)
    delivery_fee = Float(default=0.0, min_value=0.0)
    vat_amount = Float(default=0.0, min_value=0.0)
    commission_amount = Float(default=0.0, min_value=0.0)
    platform_share_amount = Float(default=0.0, min_value=0.0)

    @property
    def total(self) -> float:
        return round(self.food_amount + self.delivery_fee + self.vat_amount, 2)

    @property
    def vendor_share_amount(self) -> float:
        return round(self.total - self.platform_share_amount, 2)

    def as_metadata(self) -> dict:
        return {
            "food_amount": self.food_amount,
            "delivery_fee": self.delivery_fee,
            "vat_amount": self.vat_amount,
            "commission_amount": self.commission_amount,
            "platform_share_amount": self.platform_share_amount,
        }


def split_charge(food_amount: float, delivery_fee: float = 0.0, vat_amount: float = 0.0) -> ChargeSplit:
    """Share of a charge the platform keeps: commission on food, all of delivery and VAT."""
    commission = round(food_amount * COMMISSION_RATE, 2)
    return ChargeSplit(
        food_amount=round(food_amount, 2),
        delivery_fee=round(delivery_fee, 2),
        vat_amount=round(vat_amount, 2),
        commission_amount=commission,
        platform_share_amount=round(commission + delivery_fee + vat_amount, 2),
    )


@marketplace.aggregate
class Payment:
    reference = String(identifier=True, required=True, max_length=100)
    user_id = Identifier(required=True)
    checkout_batch_id = Identifier()
    amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="NGN")
    split = ValueObject(ChargeSplit)
    subaccount_code = String(max_length=100)
    status = String(choices=PaymentStatus, default=PaymentStatus.INITIALIZED.value)
    authorization_url = String(max_length=1000)
    gateway_transaction_id = String(max_length=255)
    failure_reason = String(max_length=500)
    initialized_at = DateTime()
    confirmed_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def initialize(
        cls,
        reference,
        user_id,
        amount,
        checkout_batch_id=None,
        authorization_url=None,
        split=None,
        subaccount_code=None,
    ):
        now = datetime.now(UTC)
        payment = cls(
            reference=reference,
            user_id=user_id,
            checkout_batch_id=checkout_batch_id,
            amount=amount,
            split=split,
            subaccount_code=subaccount_code,
            status=PaymentStatus.INITIALIZED.value,
            authorization_url=authorization_url,
            initialized_at=now,
            updated_at=now,
        )
        payment.raise_(
            PaymentInitialized(
                reference=reference,
                user_id=str(user_id),
                checkout_batch_id=str(checkout_batch_id) if checkout_batch_id else None,
                amount=amount,
                currency=payment.currency,
                platform_share_amount=split.platform_share_amount if split else None,
                initialized_at=now,
            )
        )
        return payment

    @property
    def is_confirmed(self) -> bool:
        return self.status == PaymentStatus.CONFIRMED.value

    @property
    def is_claimed(self) -> bool:
        """A prepayment is spent once a checkout has turned it into orders."""
        return self.checkout_batch_id is not None

    def claim_for_batch(self, checkout_batch_id):
        if self.is_claimed:
            raise InvalidTransition(
                f"Payment {self.reference} already covers checkout {self.checkout_batch_id}",
                reference=self.reference,
            )
        self.checkout_batch_id = checkout_batch_id
        self.updated_at = datetime.now(UTC)

    def _assert_can_transition(self, target_status):
        current = PaymentStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransition(
                f"Cannot transition payment from {current.value} to {target_status.value}",
                reference=self.reference,
            )

    def confirm(self, gateway_transaction_id=None, orders_paid=0):
        self._assert_can_transition(PaymentStatus.CONFIRMED)
        now = datetime.now(UTC)
        self.status = PaymentStatus.CONFIRMED.value
        self.gateway_transaction_id = gateway_transaction_id
        self.failure_reason = None
        self.confirmed_at = now
        self.updated_at = now

        self.raise_(
            PaymentConfirmed(
                reference=self.reference,
                user_id=str(self.user_id),
                checkout_batch_id=str(self.checkout_batch_id) if self.checkout_batch_id else None,
                amount=self.amount,
                gateway_transaction_id=gateway_transaction_id,
                orders_paid=orders_paid,
                confirmed_at=now,
            )
        )

    def fail(self, reason):
        self._assert_can_transition(PaymentStatus.FAILED)
        now = datetime.now(UTC)
        self.status = PaymentStatus.FAILED.value
        self.failure_reason = reason
        self.updated_at = now

        self.raise_(
            PaymentFailed(
                reference=self.reference,
                user_id=str(self.user_id),
                reason=reason,
                failed_at=now,
            )
        )
