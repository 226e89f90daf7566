"""FastAPI endpoints for the caller's cart."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from marketplace.api.dependencies import current_actor, principal_id
from marketplace.api.schemas import (
    AddCartLineRequest,
    CartLineIdResponse,
    CartResponse,
    CartSchema,
    SuccessResponse,
    UpdateCartLineRequest,
)
from marketplace.cart.lines import AddCartLine, RemoveCartLine, UpdateCartLine
from marketplace.cart.view import list_lines
from marketplace.identity.profile import Profile

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartResponse)
async def get_cart(actor: Profile = Depends(current_actor)) -> CartResponse:
    return CartResponse(cart=CartSchema.model_validate(list_lines(actor.id)))


@router.post("/lines", status_code=201, response_model=CartLineIdResponse)
async def add_line(body: AddCartLineRequest, caller: str = Depends(principal_id)) -> CartLineIdResponse:
    command = AddCartLine(
        actor_id=caller,
        vendor_id=body.vendor_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    line_id = current_domain.process(command, asynchronous=False)
    return CartLineIdResponse(line_id=line_id)


@router.put("/lines/{line_id}", response_model=SuccessResponse)
async def update_line(
    line_id: str, body: UpdateCartLineRequest, caller: str = Depends(principal_id)
) -> SuccessResponse:
    current_domain.process(
        UpdateCartLine(actor_id=caller, line_id=line_id, quantity=body.quantity),
        asynchronous=False,
    )
    return SuccessResponse()


@router.delete("/lines/{line_id}", response_model=SuccessResponse)
async def remove_line(line_id: str, caller: str = Depends(principal_id)) -> SuccessResponse:
    current_domain.process(RemoveCartLine(actor_id=caller, line_id=line_id), asynchronous=False)
    return SuccessResponse()
