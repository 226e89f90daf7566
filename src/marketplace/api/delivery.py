"""FastAPI endpoints for delivery tasks."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from marketplace.api.dependencies import current_actor, principal_id
from marketplace.api.schemas import (
    CreateDeliveryTaskRequest,
    DeliveryTaskListResponse,
    DeliveryTaskRefResponse,
    DeliveryTaskRefSchema,
    DeliveryTaskSchema,
    UpdateDeliveryStatusRequest,
)
from marketplace.delivery.creation import CreateDeliveryTask
from marketplace.delivery.lookup import get_task
from marketplace.delivery.progress import AcceptDeliveryTask, UpdateDeliveryStatus
from marketplace.delivery.queries import available_tasks, tasks_for
from marketplace.delivery.task import DeliveryTask
from marketplace.identity.profile import Profile

router = APIRouter(prefix="/delivery-tasks", tags=["delivery"])


def task_schema(task: DeliveryTask) -> DeliveryTaskSchema:
    return DeliveryTaskSchema(
        id=str(task.id),
        order_id=str(task.order_id),
        vendor_id=str(task.vendor_id),
        user_id=str(task.user_id),
        rider_id=str(task.rider_id) if task.rider_id else None,
        vendor_location=task.vendor_location,
        pickup_address=task.pickup_address,
        delivery_address=task.delivery_address,
        delivery_phone=task.delivery_phone,
        payment_reference=task.payment_reference,
        pickup_sequence=task.pickup_sequence,
        status=task.status,
    )


def _task_ref(delivery_task_id) -> DeliveryTaskRefResponse:
    task = get_task(delivery_task_id)
    return DeliveryTaskRefResponse(
        delivery_task=DeliveryTaskRefSchema(id=str(task.id), order_id=str(task.order_id), status=task.status)
    )


@router.post("", status_code=201, response_model=DeliveryTaskRefResponse)
async def create_delivery_task(
    body: CreateDeliveryTaskRequest, caller: str = Depends(principal_id)
) -> DeliveryTaskRefResponse:
    command = CreateDeliveryTask(actor_id=caller, order_id=body.order_id, vendor_id=body.vendor_id)
    result = current_domain.process(command, asynchronous=False)
    return DeliveryTaskRefResponse(delivery_task=DeliveryTaskRefSchema(**result))


@router.post("/{delivery_task_id}/accept", response_model=DeliveryTaskRefResponse)
async def accept_delivery_task(delivery_task_id: str, caller: str = Depends(principal_id)) -> DeliveryTaskRefResponse:
    current_domain.process(
        AcceptDeliveryTask(actor_id=caller, delivery_task_id=delivery_task_id),
        asynchronous=False,
    )
    return _task_ref(delivery_task_id)


@router.post("/{delivery_task_id}/status", response_model=DeliveryTaskRefResponse)
async def update_delivery_status(
    delivery_task_id: str, body: UpdateDeliveryStatusRequest, caller: str = Depends(principal_id)
) -> DeliveryTaskRefResponse:
    command = UpdateDeliveryStatus(actor_id=caller, delivery_task_id=delivery_task_id, new_status=body.new_status)
    current_domain.process(command, asynchronous=False)
    return _task_ref(delivery_task_id)


@router.get("/available", response_model=DeliveryTaskListResponse)
async def list_available_tasks(actor: Profile = Depends(current_actor)) -> DeliveryTaskListResponse:
    return DeliveryTaskListResponse(delivery_tasks=[task_schema(task) for task in available_tasks(actor)])


@router.get("/mine", response_model=DeliveryTaskListResponse)
async def list_my_tasks(
    status: str | None = Query(None), actor: Profile = Depends(current_actor)
) -> DeliveryTaskListResponse:
    return DeliveryTaskListResponse(delivery_tasks=[task_schema(task) for task in tasks_for(actor, status)])
