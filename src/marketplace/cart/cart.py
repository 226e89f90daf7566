"""Shopping Cart aggregate: one per user, holding lines from many vendors.

The cart id is the owner's profile id. A line is keyed by (vendor, product):
adding the same product again grows the existing line instead of creating a
second one. Lines snapshot the menu item's title and unit price when first
added. Subtotals and totals are always derived, never stored.
"""

from collections import OrderedDict
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.cart.events import (
    CartCleared,
    CartLineAdded,
    CartLineQuantityChanged,
    CartLineRemoved,
)
from marketplace.domain import marketplace


@marketplace.entity(part_of="ShoppingCart")
class CartLine:
    vendor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    title = String(max_length=200)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


@marketplace.aggregate
class ShoppingCart:
    id = Identifier(identifier=True, required=True)
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_vendor_product(self):
        keys = [(str(line.vendor_id), str(line.product_id)) for line in self.lines]
        if len(keys) != len(set(keys)):
            raise ValidationError({"lines": ["A product may appear only once per vendor in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open_for(cls, user_id):
        now = datetime.now(UTC)
        return cls(id=str(user_id), created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find_line(self, line_id):
        return next((line for line in self.lines if str(line.id) == str(line_id)), None)

    def grouped_by_vendor(self) -> list[dict]:
        """Lines bucketed per vendor in the order vendors were first added."""
        groups: OrderedDict[str, list[CartLine]] = OrderedDict()
        for line in sorted(self.lines, key=lambda line: line.added_at.timestamp() if line.added_at else 0.0):
            groups.setdefault(str(line.vendor_id), []).append(line)

        return [
            {
                "vendor_id": vendor_id,
                "lines": lines,
                "subtotal": sum(line.line_total for line in lines),
            }
            for vendor_id, lines in groups.items()
        ]

    @property
    def total(self) -> float:
        return sum(line.line_total for line in self.lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_line(self, vendor_id, product_id, title, unit_price, quantity):
        """Add a product to the cart, or increase the quantity of its existing line."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = next(
            (
                line
                for line in self.lines
                if str(line.vendor_id) == str(vendor_id) and str(line.product_id) == str(product_id)
            ),
            None,
        )

        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            line = existing
        else:
            line = CartLine(
                vendor_id=vendor_id,
                product_id=product_id,
                title=title,
                unit_price=unit_price,
                quantity=quantity,
                added_at=now,
            )
            self.add_lines(line)

        self.updated_at = now

        self.raise_(
            CartLineAdded(
                cart_id=str(self.id),
                line_id=str(line.id),
                vendor_id=str(vendor_id),
                product_id=str(product_id),
                quantity_added=quantity,
                quantity=line.quantity,
            )
        )
        return line

    def change_quantity(self, line_id, new_quantity):
        """Set a line's quantity. Zero or less removes the line."""
        line = self.find_line(line_id)
        if line is None:
            raise ValidationError({"line_id": ["Line not found in cart"]})

        if new_quantity <= 0:
            self.remove_line(line_id)
            return

        previous_quantity = line.quantity
        line.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartLineQuantityChanged(
                cart_id=str(self.id),
                line_id=str(line_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_line(self, line_id) -> bool:
        """Remove a line. Returns False when the line was not in the cart."""
        line = self.find_line(line_id)
        if line is None:
            return False

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartLineRemoved(
                cart_id=str(self.id),
                line_id=str(line_id),
                product_id=str(line.product_id),
            )
        )
        return True

    def clear(self, reason="checkout"):
        line_count = len(self.lines)
        for line in list(self.lines):
            self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                line_count=line_count,
                reason=reason,
            )
        )
