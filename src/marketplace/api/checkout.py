"""FastAPI endpoints for checkout and delivery fees."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from marketplace.api.dependencies import principal_id
from marketplace.api.schemas import (
    CalculateDeliveryRequest,
    CheckoutRequest,
    CheckoutResponse,
    DeliveryFeeResponse,
    LandmarkSchema,
    LandmarksResponse,
)
from marketplace.checkout.checkout import Checkout
from marketplace.checkout.zones import LANDMARKS, require_landmark

router = APIRouter(tags=["checkout"])


@router.post("/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout(body: CheckoutRequest | None = None, caller: str = Depends(principal_id)) -> CheckoutResponse:
    body = body or CheckoutRequest()
    command = Checkout(
        actor_id=caller,
        delivery_landmark=body.delivery_landmark,
        delivery_address=body.delivery_address,
        delivery_city=body.delivery_city,
        delivery_state=body.delivery_state,
        delivery_phone=body.delivery_phone,
        payment_reference=body.payment_reference,
    )
    result = current_domain.process(command, asynchronous=False)
    return CheckoutResponse(**result)


@router.post("/delivery/calculate", response_model=DeliveryFeeResponse)
async def calculate_delivery(body: CalculateDeliveryRequest) -> DeliveryFeeResponse:
    landmark = require_landmark(body.delivery_landmark)
    return DeliveryFeeResponse(landmark=landmark.name, zone=landmark.zone, fee=landmark.fee)


@router.get("/delivery/landmarks", response_model=LandmarksResponse)
async def delivery_landmarks() -> LandmarksResponse:
    landmarks = sorted(LANDMARKS, key=lambda landmark: (landmark.zone, landmark.name))
    return LandmarksResponse(
        landmarks=[LandmarkSchema(name=lm.name, zone=lm.zone, fee=lm.fee) for lm in landmarks]
    )
