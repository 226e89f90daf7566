"""FastAPI endpoints for vendor menus."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from marketplace.api.dependencies import principal_id
from marketplace.api.schemas import (
    CreateMenuItemRequest,
    MenuItemIdResponse,
    MenuItemSchema,
    MenuResponse,
    SuccessResponse,
    UpdateMenuItemRequest,
)
from marketplace.catalog.management import CreateMenuItem, DeleteMenuItem, UpdateMenuItem
from marketplace.catalog.menu import list_menu

vendor_router = APIRouter(prefix="/vendors", tags=["menu"])
menu_item_router = APIRouter(prefix="/menu-items", tags=["menu"])


def menu_item_schema(item) -> MenuItemSchema:
    return MenuItemSchema(
        id=str(item.id),
        vendor_id=str(item.vendor_id),
        title=item.title,
        description=item.description,
        price=item.price,
        category=item.category,
        is_available=bool(item.is_available),
        image_url=item.image_url,
    )


@vendor_router.get("/{vendor_id}/menu", response_model=MenuResponse)
async def vendor_menu(vendor_id: str, available_only: bool = Query(False, alias="availableOnly")) -> MenuResponse:
    items = list_menu(vendor_id, available_only=available_only)
    return MenuResponse(vendor_id=vendor_id, items=[menu_item_schema(item) for item in items])


@menu_item_router.post("", status_code=201, response_model=MenuItemIdResponse)
async def create_menu_item(body: CreateMenuItemRequest, caller: str = Depends(principal_id)) -> MenuItemIdResponse:
    command = CreateMenuItem(
        actor_id=caller,
        vendor_id=body.vendor_id or caller,
        title=body.title,
        description=body.description,
        price=body.price,
        category=body.category,
        is_available=body.is_available,
        image_url=body.image_url,
    )
    menu_item_id = current_domain.process(command, asynchronous=False)
    return MenuItemIdResponse(menu_item_id=menu_item_id)


@menu_item_router.put("/{menu_item_id}", response_model=SuccessResponse)
async def update_menu_item(
    menu_item_id: str, body: UpdateMenuItemRequest, caller: str = Depends(principal_id)
) -> SuccessResponse:
    command = UpdateMenuItem(
        actor_id=caller,
        menu_item_id=menu_item_id,
        title=body.title,
        description=body.description,
        price=body.price,
        category=body.category,
        is_available=body.is_available,
        image_url=body.image_url,
    )
    current_domain.process(command, asynchronous=False)
    return SuccessResponse()


@menu_item_router.delete("/{menu_item_id}", response_model=SuccessResponse)
async def delete_menu_item(menu_item_id: str, caller: str = Depends(principal_id)) -> SuccessResponse:
    current_domain.process(DeleteMenuItem(actor_id=caller, menu_item_id=menu_item_id), asynchronous=False)
    return SuccessResponse()
