"""Payment confirmation: the gateway callback (webhook or redirect).

Callbacks are delivered at least once and may race each other. The Payment
record keyed by the reference decides: once it is Confirmed, a replayed
callback changes nothing and notifies nobody.
"""

from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import NotFound
from marketplace.order.lookup import orders_where
from marketplace.order.order import Order, OrderStatus
from marketplace.payments.gateway import get_gateway
from marketplace.payments.payment import Payment, split_charge

logger = structlog.get_logger(__name__)


class ConfirmationOutcome(Enum):
    CONFIRMED = "confirmed"
    ALREADY_CONFIRMED = "already_confirmed"
    FAILED = "failed"


@marketplace.command(part_of="Payment")
class ConfirmPayment:
    reference = String(required=True, max_length=100)
    source = String(max_length=20, default="webhook")


def _find_payment(reference) -> Payment | None:
    try:
        return current_domain.repository_for(Payment).get(reference)
    except ObjectNotFoundError:
        return None


def _underpaid(verification, payment) -> bool:
    """Gateways that report the charged amount must report at least what was asked for."""
    if verification.amount is None:
        return False
    return round(verification.amount, 2) < round(payment.amount, 2)


@marketplace.command_handler(part_of=Payment)
class ConfirmPaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        reference = command.reference.strip()
        payment_repo = current_domain.repository_for(Payment)
        payment = _find_payment(reference)

        if payment is not None and payment.is_confirmed:
            logger.info("Payment callback replayed, ignoring", reference=reference, source=command.source)
            return {"outcome": ConfirmationOutcome.ALREADY_CONFIRMED.value, "orders_paid": 0}

        orders = orders_where(payment_reference=reference)
        if payment is None and not orders:
            raise NotFound(f"Unknown payment reference {reference}", reference=reference)

        if payment is None:
            # The checkout carried the reference but initialization was never recorded
            payment = Payment.initialize(
                reference=reference,
                user_id=str(orders[0].user_id),
                amount=round(sum(order.total for order in orders), 2),
                checkout_batch_id=str(orders[0].checkout_batch_id),
                split=split_charge(
                    food_amount=sum(order.subtotal for order in orders),
                    delivery_fee=sum(order.delivery_fee or 0.0 for order in orders),
                ),
            )

        verification = get_gateway().verify_transaction(reference)
        if not verification.success:
            payment.fail(verification.failure_reason or "Payment verification failed")
            payment_repo.add(payment)
            logger.warning(
                "Payment verification failed",
                reference=reference,
                source=command.source,
                reason=verification.failure_reason,
            )
            return {"outcome": ConfirmationOutcome.FAILED.value, "orders_paid": 0}

        if _underpaid(verification, payment):
            payment.fail(f"Amount mismatch: charged {verification.amount}, expected {payment.amount}")
            payment_repo.add(payment)
            logger.warning(
                "Payment amount below what the orders cost",
                reference=reference,
                source=command.source,
                charged=verification.amount,
                expected=payment.amount,
            )
            return {"outcome": ConfirmationOutcome.FAILED.value, "orders_paid": 0}

        order_repo = current_domain.repository_for(Order)
        pending = [order for order in orders if order.status == OrderStatus.PENDING.value]
        for order in pending:
            order.confirm_payment(reference)
            order_repo.add(order)

        payment.confirm(
            gateway_transaction_id=verification.gateway_transaction_id,
            orders_paid=len(pending),
        )
        payment_repo.add(payment)

        logger.info(
            "Payment confirmed",
            reference=reference,
            source=command.source,
            orders_paid=len(pending),
        )
        return {"outcome": ConfirmationOutcome.CONFIRMED.value, "orders_paid": len(pending)}
