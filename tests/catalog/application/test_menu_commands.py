"""Application tests for vendor menu management."""

import pytest
from protean import current_domain

from marketplace.catalog.management import DeleteMenuItem, UpdateMenuItem, get_menu_item
from marketplace.catalog.menu import list_menu
from marketplace.errors import Forbidden, NotFound


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestCreateMenuItem:
    def test_vendor_adds_item(self, make_profile, make_menu_item):
        vendor_id = make_profile(role="vendor")
        item_id = make_menu_item(vendor_id, title="Pepper Soup", price=1800.0)

        item = get_menu_item(item_id)
        assert item.title == "Pepper Soup"
        assert str(item.vendor_id) == vendor_id

    def test_user_cannot_add_items(self, make_profile, make_menu_item):
        user_id = make_profile()
        with pytest.raises(Forbidden):
            make_menu_item(user_id)

    def test_vendor_cannot_add_to_another_menu(self, make_profile):
        from marketplace.catalog.management import CreateMenuItem

        vendor_id = make_profile(role="vendor")
        other_id = make_profile(role="vendor")
        with pytest.raises(Forbidden):
            _process(CreateMenuItem(actor_id=vendor_id, vendor_id=other_id, title="Suya", price=500.0))


class TestUpdateAndDelete:
    def test_owner_updates(self, make_profile, make_menu_item):
        vendor_id = make_profile(role="vendor")
        item_id = make_menu_item(vendor_id)
        _process(UpdateMenuItem(actor_id=vendor_id, menu_item_id=item_id, price=1200.0))
        assert get_menu_item(item_id).price == 1200.0

    def test_other_vendor_cannot_update(self, make_profile, make_menu_item):
        vendor_id = make_profile(role="vendor")
        other_id = make_profile(role="vendor")
        item_id = make_menu_item(vendor_id)
        with pytest.raises(Forbidden):
            _process(UpdateMenuItem(actor_id=other_id, menu_item_id=item_id, price=1.0))

    def test_delete(self, make_profile, make_menu_item):
        vendor_id = make_profile(role="vendor")
        item_id = make_menu_item(vendor_id)
        _process(DeleteMenuItem(actor_id=vendor_id, menu_item_id=item_id))
        with pytest.raises(NotFound):
            get_menu_item(item_id)

    def test_update_missing_item(self, make_profile):
        vendor_id = make_profile(role="vendor")
        with pytest.raises(NotFound):
            _process(UpdateMenuItem(actor_id=vendor_id, menu_item_id="nope", price=1.0))


class TestListMenu:
    def test_sorted_by_category_then_title(self, make_profile, make_menu_item):
        vendor_id = make_profile(role="vendor")
        make_menu_item(vendor_id, title="Zobo", category="Drinks")
        make_menu_item(vendor_id, title="Fried Rice", category="Rice")
        make_menu_item(vendor_id, title="Chapman", category="Drinks")

        titles = [item.title for item in list_menu(vendor_id)]
        assert titles == ["Chapman", "Zobo", "Fried Rice"]

    def test_available_only(self, make_profile, make_menu_item):
        vendor_id = make_profile(role="vendor")
        make_menu_item(vendor_id, title="Jollof")
        make_menu_item(vendor_id, title="Banga", is_available=False)

        assert [item.title for item in list_menu(vendor_id, available_only=True)] == ["Jollof"]

    def test_scoped_to_vendor(self, make_profile, make_menu_item):
        vendor_id = make_profile(role="vendor")
        other_id = make_profile(role="vendor")
        make_menu_item(other_id)
        assert list_menu(vendor_id) == []
