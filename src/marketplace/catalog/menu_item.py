"""MenuItem aggregate: a dish a vendor sells.

Menu items are owned by exactly one vendor. Cart lines snapshot the title
and price at the time they are added, so later edits never rewrite what a
customer already put in the cart.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from marketplace.catalog.events import MenuItemAdded, MenuItemUpdated
from marketplace.domain import marketplace

_EDITABLE_FIELDS = ("title", "description", "price", "category", "is_available", "image_url")


@marketplace.aggregate
class MenuItem:
    vendor_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    description = Text()
    price = Float(required=True, min_value=0.0)
    category = String(max_length=100)
    is_available = Boolean(default=True)
    image_url = String(max_length=1000)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def add_to_menu(cls, vendor_id, title, price, description=None, category=None, image_url=None, is_available=True):
        now = datetime.now(UTC)
        item = cls(
            vendor_id=vendor_id,
            title=title,
            price=price,
            description=description,
            category=category,
            image_url=image_url,
            is_available=is_available,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            MenuItemAdded(
                menu_item_id=str(item.id),
                vendor_id=str(vendor_id),
                title=title,
                price=price,
                added_at=now,
            )
        )
        return item

    def revise(self, **changes):
        """Apply edits to the listed fields; unknown keys are ignored."""
        for field in _EDITABLE_FIELDS:
            if field in changes:
                setattr(self, field, changes[field])
        self.updated_at = datetime.now(UTC)

        self.raise_(
            MenuItemUpdated(
                menu_item_id=str(self.id),
                vendor_id=str(self.vendor_id),
                title=self.title,
                price=self.price,
                is_available=self.is_available,
            )
        )

    def belongs_to(self, vendor_id) -> bool:
        return str(self.vendor_id) == str(vendor_id)
