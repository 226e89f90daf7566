"""Domain events for the ShoppingCart aggregate.

Every cart mutation raises one of these; they are the change feed other
sessions of the same user observe.
"""

from protean.fields import Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="ShoppingCart")
class CartLineAdded:
    """A product was added to the cart, or its existing line grew."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    quantity = Integer(required=True)


@marketplace.event(part_of="ShoppingCart")
class CartLineQuantityChanged:
    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@marketplace.event(part_of="ShoppingCart")
class CartLineRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.event(part_of="ShoppingCart")
class CartCleared:
    """Every line left the cart at once (checkout)."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_count = Integer(required=True)
    reason = String(max_length=50)
