"""DeliveryTask lookups shared by handlers and the read side."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.delivery.task import DeliveryTask
from marketplace.errors import NotFound


def get_task(task_id) -> DeliveryTask:
    try:
        return current_domain.repository_for(DeliveryTask).get(str(task_id))
    except ObjectNotFoundError:
        raise NotFound(f"Delivery task {task_id} not found", delivery_task_id=str(task_id)) from None


def tasks_where(**filters) -> list[DeliveryTask]:
    tasks = current_domain.repository_for(DeliveryTask)._dao.query.filter(**filters).all().items
    return sorted(tasks, key=lambda t: t.created_at.timestamp() if t.created_at else 0.0, reverse=True)


def task_for_order(order_id) -> DeliveryTask | None:
    tasks = tasks_where(order_id=str(order_id))
    return tasks[0] if tasks else None
