"""Tests for the ShoppingCart aggregate and its lines."""

import pytest
from protean.exceptions import ValidationError

from marketplace.cart.cart import ShoppingCart
from marketplace.cart.events import CartCleared, CartLineAdded, CartLineQuantityChanged, CartLineRemoved


def _cart():
    return ShoppingCart.open_for("user-1")


def _add(cart, vendor_id="vendor-1", product_id="prod-1", unit_price=1000.0, quantity=1):
    return cart.add_line(
        vendor_id=vendor_id,
        product_id=product_id,
        title=f"Dish {product_id}",
        unit_price=unit_price,
        quantity=quantity,
    )


class TestAddLine:
    def test_new_line(self):
        cart = _cart()
        line = _add(cart, quantity=2)
        assert len(cart.lines) == 1
        assert line.quantity == 2
        assert line.line_total == 2000.0

    def test_same_product_twice_merges(self):
        cart = _cart()
        first = _add(cart, quantity=1)
        second = _add(cart, quantity=3)

        assert len(cart.lines) == 1
        assert first.id == second.id
        assert cart.lines[0].quantity == 4

    def test_same_product_from_different_vendor_is_separate(self):
        cart = _cart()
        _add(cart, vendor_id="vendor-1")
        _add(cart, vendor_id="vendor-2")
        assert len(cart.lines) == 2

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            _add(_cart(), quantity=0)

    def test_raises_event_with_running_quantity(self):
        cart = _cart()
        _add(cart, quantity=1)
        _add(cart, quantity=2)
        events = [e for e in cart._events if isinstance(e, CartLineAdded)]
        assert [e.quantity for e in events] == [1, 3]
        assert [e.quantity_added for e in events] == [1, 2]


class TestChangeQuantity:
    def test_updates_quantity(self):
        cart = _cart()
        line = _add(cart)
        cart.change_quantity(line.id, 5)
        assert cart.lines[0].quantity == 5
        assert isinstance(cart._events[-1], CartLineQuantityChanged)

    def test_zero_removes_line(self):
        cart = _cart()
        line = _add(cart)
        cart.change_quantity(line.id, 0)
        assert cart.lines == []
        assert isinstance(cart._events[-1], CartLineRemoved)

    def test_unknown_line(self):
        with pytest.raises(ValidationError):
            _cart().change_quantity("nope", 2)


class TestRemoveLine:
    def test_removes(self):
        cart = _cart()
        line = _add(cart)
        assert cart.remove_line(line.id) is True
        assert cart.lines == []

    def test_missing_line_returns_false(self):
        assert _cart().remove_line("nope") is False


class TestTotalsAndGrouping:
    def test_grouped_by_vendor_in_first_added_order(self):
        cart = _cart()
        _add(cart, vendor_id="vendor-b", product_id="p1", unit_price=500.0, quantity=2)
        _add(cart, vendor_id="vendor-a", product_id="p2", unit_price=1000.0)
        _add(cart, vendor_id="vendor-b", product_id="p3", unit_price=200.0)

        groups = cart.grouped_by_vendor()
        assert [g["vendor_id"] for g in groups] == ["vendor-b", "vendor-a"]
        assert groups[0]["subtotal"] == 1200.0
        assert groups[1]["subtotal"] == 1000.0
        assert cart.total == 2200.0
        assert cart.item_count == 4

    def test_clear(self):
        cart = _cart()
        _add(cart, product_id="p1")
        _add(cart, product_id="p2")
        cart.clear(reason="checkout")

        assert cart.lines == []
        event = cart._events[-1]
        assert isinstance(event, CartCleared)
        assert event.line_count == 2
