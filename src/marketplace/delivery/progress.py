"""Rider actions on delivery tasks: accepting and reporting progress."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.delivery.lookup import get_task, tasks_where
from marketplace.delivery.task import DeliveryStatus, DeliveryTask
from marketplace.domain import marketplace
from marketplace.errors import Forbidden, InvalidTransition
from marketplace.identity.lookup import load_actor
from marketplace.identity.policy import authorize


@marketplace.command(part_of="DeliveryTask")
class AcceptDeliveryTask:
    actor_id = Identifier(required=True)
    delivery_task_id = Identifier(required=True)


@marketplace.command(part_of="DeliveryTask")
class UpdateDeliveryStatus:
    actor_id = Identifier(required=True)
    delivery_task_id = Identifier(required=True)
    new_status = String(required=True, choices=DeliveryStatus)


def _assert_earlier_stops_collected(task: DeliveryTask):
    """With several stops on one payment, earlier pickups come first."""
    if not task.payment_reference or not task.pickup_sequence:
        return

    collected = {
        DeliveryStatus.PICKED_UP.value,
        DeliveryStatus.IN_TRANSIT.value,
        DeliveryStatus.DELIVERED.value,
        DeliveryStatus.CANCELLED.value,
    }
    waiting = [
        other
        for other in tasks_where(payment_reference=task.payment_reference)
        if other.pickup_sequence
        and other.pickup_sequence < task.pickup_sequence
        and other.is_held_by(task.rider_id)
        and other.status not in collected
    ]
    if waiting:
        raise InvalidTransition(
            "Pick up earlier stops before marking this pickup",
            delivery_task_id=str(task.id),
        )


@marketplace.command_handler(part_of=DeliveryTask)
class DeliveryProgressHandler:
    @handle(AcceptDeliveryTask)
    def accept(self, command):
        actor = load_actor(command.actor_id)
        authorize(actor, "delivery.accept")

        if not actor.is_approved_rider:
            raise Forbidden("Only approved riders can accept delivery tasks", rider_id=str(actor.id))
        if not actor.is_available:
            raise Forbidden("Set yourself available before accepting delivery tasks", rider_id=str(actor.id))

        task = get_task(command.delivery_task_id)
        task.assign(str(actor.id))
        current_domain.repository_for(DeliveryTask).add(task)
        return task.status

    @handle(UpdateDeliveryStatus)
    def update_status(self, command):
        actor = load_actor(command.actor_id)
        task = get_task(command.delivery_task_id)
        task.assert_can_advance(command.new_status)
        authorize(actor, "delivery.progress", owner_id=task.rider_id)

        if command.new_status == DeliveryStatus.PICKED_UP.value:
            _assert_earlier_stops_collected(task)

        task.advance(str(actor.id), command.new_status)
        current_domain.repository_for(DeliveryTask).add(task)
        return task.status
