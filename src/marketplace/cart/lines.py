"""Cart line commands: add, update and remove lines.

A caller only ever touches their own cart. Line ids are global, so a line
id that exists but lives in somebody else's cart is refused as Forbidden,
while an id nobody owns is NotFound (update) or a no-op (remove).
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.cart.cart import CartLine, ShoppingCart
from marketplace.catalog.menu_item import MenuItem
from marketplace.domain import marketplace
from marketplace.errors import Forbidden, NotFound
from marketplace.identity.lookup import load_actor
from marketplace.identity.policy import authorize

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="ShoppingCart")
class AddCartLine:
    actor_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(min_value=1, default=1)


@marketplace.command(part_of="ShoppingCart")
class UpdateCartLine:
    """Set a line's quantity; zero or less removes the line."""

    actor_id = Identifier(required=True)
    line_id = Identifier(required=True)
    quantity = Integer(required=True)


@marketplace.command(part_of="ShoppingCart")
class RemoveCartLine:
    actor_id = Identifier(required=True)
    line_id = Identifier(required=True)


def find_cart(user_id) -> ShoppingCart | None:
    try:
        return current_domain.repository_for(ShoppingCart).get(str(user_id))
    except ObjectNotFoundError:
        return None


def _line_exists_elsewhere(line_id) -> bool:
    lines = current_domain.repository_for(CartLine)._dao.query.filter(id=str(line_id)).all().items
    return bool(lines)


def _orderable_item(vendor_id, product_id) -> MenuItem:
    try:
        item = current_domain.repository_for(MenuItem).get(str(product_id))
    except ObjectNotFoundError:
        item = None

    if item is None or not item.belongs_to(vendor_id):
        raise NotFound(
            f"Product {product_id} not found for vendor {vendor_id}",
            product_id=str(product_id),
            vendor_id=str(vendor_id),
        )
    if not item.is_available:
        raise NotFound(f"Product {product_id} is not available", product_id=str(product_id))
    return item


@marketplace.command_handler(part_of=ShoppingCart)
class CartLinesHandler:
    @handle(AddCartLine)
    def add_line(self, command):
        actor = load_actor(command.actor_id)
        authorize(actor, "cart.edit", owner_id=actor.id)

        item = _orderable_item(command.vendor_id, command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = find_cart(actor.id)
        if cart is None:
            cart = ShoppingCart.open_for(actor.id)
        line = cart.add_line(
            vendor_id=str(item.vendor_id),
            product_id=str(item.id),
            title=item.title,
            unit_price=item.price,
            quantity=command.quantity or 1,
        )
        repo.add(cart)
        return str(line.id)

    @handle(UpdateCartLine)
    def update_line(self, command):
        actor = load_actor(command.actor_id)
        authorize(actor, "cart.edit", owner_id=actor.id)

        cart = find_cart(actor.id)
        if cart is None or cart.find_line(command.line_id) is None:
            if _line_exists_elsewhere(command.line_id):
                raise Forbidden("Cart line belongs to another user", line_id=str(command.line_id))
            raise NotFound(f"Cart line {command.line_id} not found", line_id=str(command.line_id))

        cart.change_quantity(command.line_id, command.quantity)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(RemoveCartLine)
    def remove_line(self, command):
        actor = load_actor(command.actor_id)
        authorize(actor, "cart.edit", owner_id=actor.id)

        cart = find_cart(actor.id)
        if cart is not None and cart.remove_line(command.line_id):
            current_domain.repository_for(ShoppingCart).add(cart)
            return

        if _line_exists_elsewhere(command.line_id):
            raise Forbidden("Cart line belongs to another user", line_id=str(command.line_id))

        logger.debug("Cart line already gone", line_id=str(command.line_id), user_id=str(actor.id))
