import pytest


@pytest.fixture()
def paid_order(make_profile, make_menu_item, add_to_cart, checkout, pay_batch):
    """A single Paid order; returns ``(order_id, user_id, vendor_id)``."""
    user_id = make_profile(email="buyer@example.com")
    vendor_id = make_profile(role="vendor", address="9 Azikoro Road", location="Azikoro")
    add_to_cart(user_id, vendor_id, make_menu_item(vendor_id, title="Banga Soup", price=2500.0))
    result = checkout(user_id, delivery_landmark="Ovom", delivery_phone="08030000000")
    pay_batch(user_id, result["checkout_batch_id"])
    return result["order_ids"][0], user_id, vendor_id
