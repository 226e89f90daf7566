"""Application tests for the cart line commands and the cart view."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.cart.lines import AddCartLine, RemoveCartLine, UpdateCartLine, find_cart
from marketplace.cart.view import list_lines
from marketplace.catalog.management import UpdateMenuItem
from marketplace.errors import Forbidden, NotFound


def _process(command):
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def vendor_id(make_profile):
    return make_profile(role="vendor")


@pytest.fixture()
def user_id(make_profile):
    return make_profile()


class TestAddCartLine:
    def test_creates_cart_on_first_add(self, user_id, vendor_id, make_menu_item, add_to_cart):
        item_id = make_menu_item(vendor_id, price=1500.0)
        line_id = add_to_cart(user_id, vendor_id, item_id, quantity=2)

        cart = find_cart(user_id)
        assert str(cart.lines[0].id) == line_id
        assert cart.lines[0].unit_price == 1500.0

    def test_adding_twice_merges_quantities(self, user_id, vendor_id, make_menu_item, add_to_cart):
        item_id = make_menu_item(vendor_id)
        first = add_to_cart(user_id, vendor_id, item_id, quantity=2)
        second = add_to_cart(user_id, vendor_id, item_id, quantity=3)

        cart = find_cart(user_id)
        assert first == second
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 5

    def test_unknown_product(self, user_id, vendor_id, add_to_cart):
        with pytest.raises(NotFound):
            add_to_cart(user_id, vendor_id, "missing-product")

    def test_product_of_another_vendor(self, user_id, vendor_id, make_profile, make_menu_item, add_to_cart):
        other_vendor = make_profile(role="vendor")
        item_id = make_menu_item(other_vendor)
        with pytest.raises(NotFound):
            add_to_cart(user_id, vendor_id, item_id)

    def test_unavailable_product(self, user_id, vendor_id, make_menu_item, add_to_cart):
        item_id = make_menu_item(vendor_id, is_available=False)
        with pytest.raises(NotFound):
            add_to_cart(user_id, vendor_id, item_id)

    def test_zero_quantity_rejected(self, user_id, vendor_id, make_menu_item):
        item_id = make_menu_item(vendor_id)
        with pytest.raises(ValidationError):
            _process(AddCartLine(actor_id=user_id, vendor_id=vendor_id, product_id=item_id, quantity=0))

    def test_price_snapshot_survives_menu_edit(self, user_id, vendor_id, make_menu_item, add_to_cart):
        item_id = make_menu_item(vendor_id, price=1000.0)
        add_to_cart(user_id, vendor_id, item_id)
        _process(UpdateMenuItem(actor_id=vendor_id, menu_item_id=item_id, price=9000.0))

        assert find_cart(user_id).lines[0].unit_price == 1000.0


class TestUpdateAndRemove:
    def test_update_quantity(self, user_id, vendor_id, make_menu_item, add_to_cart):
        line_id = add_to_cart(user_id, vendor_id, make_menu_item(vendor_id))
        _process(UpdateCartLine(actor_id=user_id, line_id=line_id, quantity=4))
        assert find_cart(user_id).lines[0].quantity == 4

    def test_update_to_zero_removes(self, user_id, vendor_id, make_menu_item, add_to_cart):
        line_id = add_to_cart(user_id, vendor_id, make_menu_item(vendor_id))
        _process(UpdateCartLine(actor_id=user_id, line_id=line_id, quantity=0))
        assert find_cart(user_id).lines == []

    def test_update_unknown_line(self, user_id):
        with pytest.raises(NotFound):
            _process(UpdateCartLine(actor_id=user_id, line_id="nope", quantity=2))

    def test_update_someone_elses_line(self, user_id, vendor_id, make_profile, make_menu_item, add_to_cart):
        other_user = make_profile()
        line_id = add_to_cart(other_user, vendor_id, make_menu_item(vendor_id))
        with pytest.raises(Forbidden):
            _process(UpdateCartLine(actor_id=user_id, line_id=line_id, quantity=2))

    def test_remove(self, user_id, vendor_id, make_menu_item, add_to_cart):
        line_id = add_to_cart(user_id, vendor_id, make_menu_item(vendor_id))
        _process(RemoveCartLine(actor_id=user_id, line_id=line_id))
        assert find_cart(user_id).lines == []

    def test_remove_missing_line_is_a_no_op(self, user_id):
        _process(RemoveCartLine(actor_id=user_id, line_id="nope"))

    def test_remove_someone_elses_line(self, user_id, vendor_id, make_profile, make_menu_item, add_to_cart):
        other_user = make_profile()
        line_id = add_to_cart(other_user, vendor_id, make_menu_item(vendor_id))
        with pytest.raises(Forbidden):
            _process(RemoveCartLine(actor_id=user_id, line_id=line_id))
        assert len(find_cart(other_user).lines) == 1

    def test_unregistered_caller(self):
        with pytest.raises(Forbidden):
            _process(RemoveCartLine(actor_id="ghost", line_id="nope"))


class TestListLines:
    def test_empty_cart(self, user_id):
        assert list_lines(user_id) == {"vendors": [], "total": 0.0, "item_count": 0}

    def test_grouped_with_totals(self, user_id, make_profile, make_menu_item, add_to_cart):
        v1 = make_profile(role="vendor")
        v2 = make_profile(role="vendor")
        add_to_cart(user_id, v1, make_menu_item(v1, title="Rice", price=1000.0))
        add_to_cart(user_id, v2, make_menu_item(v2, title="Suya", price=500.0), quantity=2)

        view = list_lines(user_id)
        assert [group["vendor_id"] for group in view["vendors"]] == [v1, v2]
        assert view["vendors"][1]["lines"][0]["line_total"] == 1000.0
        assert view["total"] == 2000.0
        assert view["item_count"] == 3
