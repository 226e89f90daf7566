"""DeliveryTask aggregate: getting one paid order from vendor to user.

State Machine (6 states):
    PENDING → ASSIGNED → PICKED_UP → IN_TRANSIT → DELIVERED
    any state but DELIVERED → CANCELLED   (driven by the order)

A rider claims a Pending task (→ Assigned) and from then on only that
rider moves it forward, one step at a time.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from marketplace.delivery.events import (
    DeliveryTaskAssigned,
    DeliveryTaskCancelled,
    DeliveryTaskCreated,
    DeliveryTaskDelivered,
    DeliveryTaskInTransit,
    DeliveryTaskPickedUp,
)
from marketplace.domain import marketplace
from marketplace.errors import Forbidden, InvalidTransition


class DeliveryStatus(Enum):
    PENDING = "Pending"
    ASSIGNED = "Assigned"
    PICKED_UP = "Picked_Up"
    IN_TRANSIT = "In_Transit"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


_VALID_TRANSITIONS = {
    DeliveryStatus.PENDING: {DeliveryStatus.ASSIGNED, DeliveryStatus.CANCELLED},
    DeliveryStatus.ASSIGNED: {DeliveryStatus.PICKED_UP, DeliveryStatus.CANCELLED},
    DeliveryStatus.PICKED_UP: {DeliveryStatus.IN_TRANSIT, DeliveryStatus.CANCELLED},
    DeliveryStatus.IN_TRANSIT: {DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED},
    DeliveryStatus.DELIVERED: set(),  # Terminal
    DeliveryStatus.CANCELLED: set(),  # Terminal
}

# Statuses that only exist once a rider holds the task
_RIDER_HELD_STATES = {
    DeliveryStatus.ASSIGNED,
    DeliveryStatus.PICKED_UP,
    DeliveryStatus.IN_TRANSIT,
    DeliveryStatus.DELIVERED,
}

# Steps a rider reports after accepting the task
RIDER_PROGRESS_STATES = {
    DeliveryStatus.PICKED_UP,
    DeliveryStatus.IN_TRANSIT,
    DeliveryStatus.DELIVERED,
}


@marketplace.aggregate
class DeliveryTask:
    order_id = Identifier(required=True, unique=True)
    vendor_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rider_id = Identifier()
    vendor_location = String(max_length=255)
    pickup_address = String(max_length=500)
    delivery_address = String(required=True, max_length=500)
    delivery_phone = String(max_length=30)
    payment_reference = String(max_length=100)
    pickup_sequence = Integer(min_value=1)
    status = String(choices=DeliveryStatus, default=DeliveryStatus.PENDING.value)
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    assigned_at = DateTime()
    picked_up_at = DateTime()
    in_transit_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def rider_required_once_assigned(self):
        if DeliveryStatus(self.status) in _RIDER_HELD_STATES and not self.rider_id:
            raise ValidationError({"rider_id": [f"A {self.status} delivery task must have a rider"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def dispatch(
        cls,
        order_id,
        vendor_id,
        user_id,
        delivery_address,
        pickup_address=None,
        vendor_location=None,
        delivery_phone=None,
        payment_reference=None,
        pickup_sequence=None,
    ):
        now = datetime.now(UTC)
        task = cls(
            order_id=order_id,
            vendor_id=vendor_id,
            user_id=user_id,
            vendor_location=vendor_location,
            pickup_address=pickup_address,
            delivery_address=delivery_address,
            delivery_phone=delivery_phone,
            payment_reference=payment_reference,
            pickup_sequence=pickup_sequence,
            status=DeliveryStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        task.raise_(
            DeliveryTaskCreated(
                delivery_task_id=str(task.id),
                order_id=str(order_id),
                vendor_id=str(vendor_id),
                user_id=str(user_id),
                pickup_address=pickup_address,
                delivery_address=delivery_address,
                created_at=now,
            )
        )
        return task

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = DeliveryStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransition(
                f"Cannot move delivery task from {current.value} to {target_status.value}",
                delivery_task_id=str(self.id),
                current_status=current.value,
                requested_status=target_status.value,
            )

    def _parties(self):
        return {
            "delivery_task_id": str(self.id),
            "order_id": str(self.order_id),
            "vendor_id": str(self.vendor_id),
            "user_id": str(self.user_id),
        }

    def is_held_by(self, rider_id) -> bool:
        return self.rider_id is not None and str(self.rider_id) == str(rider_id)

    # -------------------------------------------------------------------
    # Rider actions
    # -------------------------------------------------------------------
    def assign(self, rider_id):
        self._assert_can_transition(DeliveryStatus.ASSIGNED)
        now = datetime.now(UTC)

        with atomic_change(self):
            self.rider_id = rider_id
            self.status = DeliveryStatus.ASSIGNED.value
            self.assigned_at = now
            self.updated_at = now

        self.raise_(DeliveryTaskAssigned(**self._parties(), rider_id=str(rider_id), assigned_at=now))

    def assert_can_advance(self, target_status) -> DeliveryStatus:
        """Validate a rider-reported step against the state machine alone."""
        if target_status not in {s.value for s in DeliveryStatus}:
            raise InvalidTransition(f"Unknown delivery status '{target_status}'", delivery_task_id=str(self.id))
        target = DeliveryStatus(target_status)
        if target not in RIDER_PROGRESS_STATES:
            raise InvalidTransition(
                f"Riders cannot move a delivery task to {target.value}",
                delivery_task_id=str(self.id),
            )
        self._assert_can_transition(target)
        return target

    def advance(self, rider_id, target_status):
        """Move the task one step forward on behalf of its rider."""
        target = self.assert_can_advance(target_status)
        if not self.is_held_by(rider_id):
            raise Forbidden("Delivery task is not assigned to this rider", delivery_task_id=str(self.id))

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        if target == DeliveryStatus.PICKED_UP:
            self.picked_up_at = now
            self.raise_(DeliveryTaskPickedUp(**self._parties(), rider_id=str(rider_id), picked_up_at=now))
        elif target == DeliveryStatus.IN_TRANSIT:
            self.in_transit_at = now
            self.raise_(DeliveryTaskInTransit(**self._parties(), rider_id=str(rider_id), in_transit_at=now))
        else:
            self.delivered_at = now
            self.raise_(DeliveryTaskDelivered(**self._parties(), rider_id=str(rider_id), delivered_at=now))

    # -------------------------------------------------------------------
    # Order-driven cancellation
    # -------------------------------------------------------------------
    def cancel(self, reason=None) -> bool:
        """Cancel the task. Returns False when it is already finished."""
        if DeliveryStatus(self.status) in (DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED):
            return False

        now = datetime.now(UTC)
        self.status = DeliveryStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            DeliveryTaskCancelled(
                **self._parties(),
                rider_id=str(self.rider_id) if self.rider_id else None,
                reason=reason,
                cancelled_at=now,
            )
        )
        return True
