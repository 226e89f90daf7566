"""Domain events for the MenuItem aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="MenuItem")
class MenuItemAdded:
    """A vendor put a new dish on its menu."""

    __version__ = 1

    menu_item_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    price = Float(required=True)
    added_at = DateTime(required=True)


@marketplace.event(part_of="MenuItem")
class MenuItemUpdated:
    __version__ = 1

    menu_item_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    title = String(max_length=200)
    price = Float()
    is_available = Boolean(default=True)
