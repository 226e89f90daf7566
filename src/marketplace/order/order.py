"""Order aggregate: one order per cart line, owned by one vendor.

State Machine (7 states):
    PENDING → PAID                      (payment confirmation)
    PENDING, PAID → ACCEPTED            (vendor)
    ACCEPTED → CONFIRMED                (vendor)
    PENDING, PAID → REJECTED            (vendor)
    ACCEPTED, CONFIRMED → COMPLETED     (vendor)
    PENDING, ACCEPTED → CANCELLED       (vendor or user)

REJECTED, COMPLETED and CANCELLED are terminal. Orders are never deleted.
Every order of a single checkout carries the same ``checkout_batch_id``.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, Identifier, Integer, String, ValueObject

from marketplace.domain import marketplace
from marketplace.errors import Conflict, InvalidTransition
from marketplace.order.events import (
    OrderAccepted,
    OrderCancelled,
    OrderCompleted,
    OrderConfirmed,
    OrderDeliveryDetailsSet,
    OrderPaid,
    OrderPlaced,
    OrderRejected,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    ACCEPTED = "Accepted"
    CONFIRMED = "Confirmed"
    REJECTED = "Rejected"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class CancellationActor(Enum):
    USER = "user"
    VENDOR = "vendor"
    ADMIN = "admin"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PAID,
        OrderStatus.ACCEPTED,
        OrderStatus.REJECTED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PAID: {OrderStatus.ACCEPTED, OrderStatus.REJECTED},
    OrderStatus.ACCEPTED: {
        OrderStatus.CONFIRMED,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.CONFIRMED: {OrderStatus.COMPLETED},
    OrderStatus.REJECTED: set(),  # Terminal
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Statuses a vendor may request through the status update endpoint
VENDOR_TARGETS = {
    OrderStatus.ACCEPTED,
    OrderStatus.CONFIRMED,
    OrderStatus.REJECTED,
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED,
}

# Statuses from which a paid order may be dispatched for delivery
DISPATCHABLE_STATES = {
    OrderStatus.PAID,
    OrderStatus.ACCEPTED,
    OrderStatus.CONFIRMED,
    OrderStatus.COMPLETED,
}

# Delivery details stay editable until the vendor starts working on the order
_DELIVERY_EDITABLE_STATES = {OrderStatus.PENDING, OrderStatus.PAID}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in _VALID_TRANSITIONS.get(current, set())


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class DeliveryDetails:
    """Where the order goes, captured at checkout or attached afterwards."""

    landmark = String(max_length=100)
    zone = Integer()
    address = String(max_length=500)
    city = String(max_length=100)
    state = String(max_length=100)
    phone = String(max_length=30)

    def formatted_address(self) -> str | None:
        parts = [part.strip() for part in (self.address, self.city, self.state) if part and part.strip()]
        return ", ".join(parts) if parts else None


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    checkout_batch_id = Identifier(required=True)
    user_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_title = String(max_length=200)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)
    delivery_fee = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_reference = String(max_length=100)
    delivery = ValueObject(DeliveryDetails)
    cancellation_reason = String(max_length=500)
    cancelled_by = String(choices=CancellationActor)
    paid_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        checkout_batch_id,
        user_id,
        vendor_id,
        product_id,
        product_title,
        quantity,
        unit_price,
        delivery_fee=0.0,
        delivery=None,
        payment_reference=None,
        paid=False,
    ):
        """Create an order for one cart line.

        ``paid`` is set when the checkout references a payment that the
        gateway has already confirmed; the order then starts out Paid.
        """
        now = datetime.now(UTC)
        subtotal = round(quantity * unit_price, 2)
        total = round(subtotal + (delivery_fee or 0.0), 2)
        status = OrderStatus.PAID if paid else OrderStatus.PENDING

        order = cls(
            checkout_batch_id=checkout_batch_id,
            user_id=user_id,
            vendor_id=vendor_id,
            product_id=product_id,
            product_title=product_title,
            quantity=quantity,
            unit_price=unit_price,
            subtotal=subtotal,
            delivery_fee=delivery_fee or 0.0,
            total=total,
            status=status.value,
            payment_reference=payment_reference,
            delivery=delivery,
            paid_at=now if paid else None,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                checkout_batch_id=str(checkout_batch_id),
                user_id=str(user_id),
                vendor_id=str(vendor_id),
                product_id=str(product_id),
                product_title=product_title,
                quantity=quantity,
                total=total,
                status=status.value,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if not can_transition(current, target_status):
            raise InvalidTransition(
                f"Cannot transition from {current.value} to {target_status.value}",
                order_id=str(self.id),
                current_status=current.value,
                requested_status=target_status.value,
            )

    def assert_status(self, expected_status):
        """Guard against acting on a stale read of the order."""
        if expected_status and self.status != expected_status:
            raise Conflict(
                f"Order is {self.status}, expected {expected_status}",
                order_id=str(self.id),
                current_status=self.status,
                expected_status=expected_status,
            )

    def _move_to(self, target_status):
        self._assert_can_transition(target_status)
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now
        return now

    def _party_fields(self):
        return {
            "order_id": str(self.id),
            "user_id": str(self.user_id),
            "vendor_id": str(self.vendor_id),
            "product_title": self.product_title,
        }

    @property
    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS[OrderStatus(self.status)]

    @property
    def delivery_address(self) -> str | None:
        return self.delivery.formatted_address() if self.delivery else None

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def attach_payment_reference(self, reference):
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise InvalidTransition(
                f"Payment can only be started for a Pending order, not {self.status}",
                order_id=str(self.id),
            )
        self.payment_reference = reference
        self.updated_at = datetime.now(UTC)

    def confirm_payment(self, reference):
        now = self._move_to(OrderStatus.PAID)
        self.payment_reference = reference
        self.paid_at = now

        self.raise_(
            OrderPaid(
                **self._party_fields(),
                payment_reference=reference,
                total=self.total,
                paid_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Vendor transitions
    # -------------------------------------------------------------------
    def accept(self):
        now = self._move_to(OrderStatus.ACCEPTED)
        self.raise_(OrderAccepted(**self._party_fields(), accepted_at=now))

    def confirm(self):
        now = self._move_to(OrderStatus.CONFIRMED)
        self.raise_(OrderConfirmed(**self._party_fields(), confirmed_at=now))

    def reject(self, reason=None):
        now = self._move_to(OrderStatus.REJECTED)
        self.cancellation_reason = reason
        self.raise_(OrderRejected(**self._party_fields(), reason=reason, rejected_at=now))

    def complete(self):
        now = self._move_to(OrderStatus.COMPLETED)
        self.raise_(OrderCompleted(**self._party_fields(), completed_at=now))

    def cancel(self, cancelled_by, reason=None):
        now = self._move_to(OrderStatus.CANCELLED)
        self.cancelled_by = CancellationActor(cancelled_by).value
        self.cancellation_reason = reason
        self.raise_(
            OrderCancelled(
                **self._party_fields(),
                reason=reason,
                cancelled_by=self.cancelled_by,
                cancelled_at=now,
            )
        )

    def transition_by_vendor(self, target_status, reason=None):
        """Dispatch a vendor's requested status to the matching transition."""
        if target_status not in {s.value for s in OrderStatus}:
            raise InvalidTransition(f"Unknown order status '{target_status}'", order_id=str(self.id))

        target = OrderStatus(target_status)
        if target not in VENDOR_TARGETS:
            raise InvalidTransition(
                f"Vendors cannot move an order to {target.value}",
                order_id=str(self.id),
                requested_status=target.value,
            )

        if target == OrderStatus.ACCEPTED:
            self.accept()
        elif target == OrderStatus.CONFIRMED:
            self.confirm()
        elif target == OrderStatus.REJECTED:
            self.reject(reason)
        elif target == OrderStatus.COMPLETED:
            self.complete()
        else:
            self.cancel(CancellationActor.VENDOR.value, reason)

    # -------------------------------------------------------------------
    # Delivery details
    # -------------------------------------------------------------------
    def set_delivery_details(self, delivery: DeliveryDetails):
        if OrderStatus(self.status) not in _DELIVERY_EDITABLE_STATES:
            raise InvalidTransition(
                f"Delivery details cannot change once the order is {self.status}",
                order_id=str(self.id),
            )

        self.delivery = delivery
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderDeliveryDetailsSet(
                order_id=str(self.id),
                delivery_landmark=delivery.landmark,
                delivery_address=delivery.address,
                delivery_city=delivery.city,
                delivery_state=delivery.state,
                delivery_phone=delivery.phone,
            )
        )
