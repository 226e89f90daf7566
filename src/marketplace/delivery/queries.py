"""Read side of delivery tasks."""

from marketplace.delivery.lookup import tasks_where
from marketplace.delivery.task import DeliveryStatus, DeliveryTask
from marketplace.errors import Forbidden
from marketplace.identity.profile import Profile, Role


def available_tasks(actor: Profile) -> list[DeliveryTask]:
    """Unclaimed tasks, visible to approved riders and admins."""
    if not (actor.is_approved_rider or actor.has_role(Role.ADMIN)):
        raise Forbidden("Only approved riders can browse delivery tasks", actor_id=str(actor.id))
    tasks = tasks_where(status=DeliveryStatus.PENDING.value)
    return sorted(tasks, key=lambda t: t.created_at.timestamp() if t.created_at else 0.0)


def tasks_for(actor: Profile, status: str | None = None) -> list[DeliveryTask]:
    """Riders see the tasks they hold, vendors those they dispatched, users those headed their way."""
    filters = {"status": status} if status else {}
    if actor.has_role(Role.ADMIN):
        return tasks_where(**filters)
    if actor.has_role(Role.RIDER):
        return tasks_where(rider_id=str(actor.id), **filters)
    if actor.has_role(Role.VENDOR):
        return tasks_where(vendor_id=str(actor.id), **filters)
    return tasks_where(user_id=str(actor.id), **filters)
