"""Menu management: commands and handler.

Vendors maintain their own menus; admins may edit or remove any item.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.catalog.menu_item import MenuItem
from marketplace.domain import marketplace
from marketplace.errors import NotFound
from marketplace.identity.lookup import load_actor
from marketplace.identity.policy import authorize

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="MenuItem")
class CreateMenuItem:
    actor_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    description = Text()
    price = Float(required=True, min_value=0.0)
    category = String(max_length=100)
    is_available = Boolean(default=True)
    image_url = String(max_length=1000)


@marketplace.command(part_of="MenuItem")
class UpdateMenuItem:
    """Edit a menu item. Fields left unset keep their current value."""

    actor_id = Identifier(required=True)
    menu_item_id = Identifier(required=True)
    title = String(max_length=200)
    description = Text()
    price = Float(min_value=0.0)
    category = String(max_length=100)
    is_available = Boolean()
    image_url = String(max_length=1000)


@marketplace.command(part_of="MenuItem")
class DeleteMenuItem:
    actor_id = Identifier(required=True)
    menu_item_id = Identifier(required=True)


def get_menu_item(menu_item_id) -> MenuItem:
    try:
        return current_domain.repository_for(MenuItem).get(str(menu_item_id))
    except ObjectNotFoundError:
        raise NotFound(f"Menu item {menu_item_id} not found", menu_item_id=str(menu_item_id)) from None


@marketplace.command_handler(part_of=MenuItem)
class ManageMenuHandler:
    @handle(CreateMenuItem)
    def create_menu_item(self, command):
        actor = load_actor(command.actor_id)
        authorize(actor, "menu_item.create", owner_id=command.vendor_id)

        item = MenuItem.add_to_menu(
            vendor_id=str(command.vendor_id),
            title=command.title,
            price=command.price,
            description=command.description,
            category=command.category,
            image_url=command.image_url,
            is_available=command.is_available if command.is_available is not None else True,
        )
        current_domain.repository_for(MenuItem).add(item)
        return str(item.id)

    @handle(UpdateMenuItem)
    def update_menu_item(self, command):
        actor = load_actor(command.actor_id)
        item = get_menu_item(command.menu_item_id)
        authorize(actor, "menu_item.update", owner_id=item.vendor_id)

        changes = {
            field: getattr(command, field)
            for field in ("title", "description", "price", "category", "is_available", "image_url")
            if getattr(command, field) is not None
        }
        item.revise(**changes)
        current_domain.repository_for(MenuItem).add(item)

    @handle(DeleteMenuItem)
    def delete_menu_item(self, command):
        actor = load_actor(command.actor_id)
        item = get_menu_item(command.menu_item_id)
        authorize(actor, "menu_item.delete", owner_id=item.vendor_id)

        current_domain.repository_for(MenuItem)._dao.delete(item)
        logger.info(
            "Menu item deleted",
            menu_item_id=str(item.id),
            vendor_id=str(item.vendor_id),
            deleted_by=str(actor.id),
        )
