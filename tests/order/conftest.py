import pytest


@pytest.fixture()
def placed_order(make_profile, make_menu_item, add_to_cart, checkout):
    """A single Pending order; returns ``(order_id, user_id, vendor_id)``."""
    user_id = make_profile(email="buyer@example.com")
    vendor_id = make_profile(role="vendor", address="9 Azikoro Road")
    add_to_cart(user_id, vendor_id, make_menu_item(vendor_id, title="Fisherman Soup", price=3000.0))
    result = checkout(user_id, delivery_landmark="Ovom")
    return result["order_ids"][0], user_id, vendor_id
