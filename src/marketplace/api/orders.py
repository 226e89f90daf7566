"""FastAPI endpoints for orders: vendor transitions, cancellation and reads."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from marketplace.api.dependencies import current_actor, principal_id
from marketplace.api.schemas import (
    BatchResponse,
    CancelOrderRequest,
    DeliveryDetailsSchema,
    OrderListResponse,
    OrderResponse,
    OrderSchema,
    OrderStatusResponse,
    SetDeliveryDetailsRequest,
    SuccessResponse,
    UpdateOrderStatusRequest,
)
from marketplace.identity.profile import Profile
from marketplace.order.delivery_details import SetDeliveryDetails
from marketplace.order.order import Order
from marketplace.order.queries import batch_visible_to, order_visible_to, orders_visible_to
from marketplace.order.transitions import CancelOrder, UpdateOrderStatus

router = APIRouter(prefix="/orders", tags=["orders"])


def order_schema(order: Order) -> OrderSchema:
    delivery = None
    if order.delivery:
        delivery = DeliveryDetailsSchema(
            landmark=order.delivery.landmark,
            zone=order.delivery.zone,
            address=order.delivery.address,
            city=order.delivery.city,
            state=order.delivery.state,
            phone=order.delivery.phone,
        )
    return OrderSchema(
        id=str(order.id),
        checkout_batch_id=str(order.checkout_batch_id),
        user_id=str(order.user_id),
        vendor_id=str(order.vendor_id),
        product_id=str(order.product_id),
        product_title=order.product_title,
        quantity=order.quantity,
        unit_price=order.unit_price,
        subtotal=order.subtotal,
        delivery_fee=order.delivery_fee or 0.0,
        total=order.total,
        status=order.status,
        payment_reference=order.payment_reference,
        delivery=delivery,
        cancellation_reason=order.cancellation_reason,
        cancelled_by=order.cancelled_by,
    )


@router.post("/update-status", response_model=OrderStatusResponse)
async def update_order_status(
    body: UpdateOrderStatusRequest, caller: str = Depends(principal_id)
) -> OrderStatusResponse:
    command = UpdateOrderStatus(
        actor_id=caller,
        order_id=body.order_id,
        vendor_id=body.vendor_id,
        new_status=body.new_status,
        expected_status=body.expected_status,
        reason=body.reason,
    )
    status = current_domain.process(command, asynchronous=False)
    return OrderStatusResponse(order_id=body.order_id, status=status)


@router.post("/{order_id}/cancel", response_model=OrderStatusResponse)
async def cancel_order(
    order_id: str, body: CancelOrderRequest | None = None, caller: str = Depends(principal_id)
) -> OrderStatusResponse:
    body = body or CancelOrderRequest()
    command = CancelOrder(
        actor_id=caller,
        order_id=order_id,
        expected_status=body.expected_status,
        reason=body.reason,
    )
    status = current_domain.process(command, asynchronous=False)
    return OrderStatusResponse(order_id=order_id, status=status)


@router.put("/{order_id}/delivery", response_model=SuccessResponse)
async def set_delivery_details(
    order_id: str, body: SetDeliveryDetailsRequest, caller: str = Depends(principal_id)
) -> SuccessResponse:
    command = SetDeliveryDetails(
        actor_id=caller,
        order_id=order_id,
        delivery_landmark=body.delivery_landmark,
        delivery_address=body.delivery_address,
        delivery_city=body.delivery_city,
        delivery_state=body.delivery_state,
        delivery_phone=body.delivery_phone,
    )
    current_domain.process(command, asynchronous=False)
    return SuccessResponse()


@router.get("", response_model=OrderListResponse)
async def list_orders(status: str | None = Query(None), actor: Profile = Depends(current_actor)) -> OrderListResponse:
    return OrderListResponse(orders=[order_schema(order) for order in orders_visible_to(actor, status)])


@router.get("/batches/{checkout_batch_id}", response_model=BatchResponse)
async def get_batch(checkout_batch_id: str, actor: Profile = Depends(current_actor)) -> BatchResponse:
    orders = batch_visible_to(actor, checkout_batch_id)
    return BatchResponse(
        checkout_batch_id=checkout_batch_id,
        orders=[order_schema(order) for order in orders],
        total=round(sum(order.total for order in orders), 2),
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, actor: Profile = Depends(current_actor)) -> OrderResponse:
    return OrderResponse(order=order_schema(order_visible_to(actor, order_id)))
