"""BDD tests for checking out a multi-vendor cart."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from marketplace.cart.lines import find_cart
from marketplace.catalog.management import DeleteMenuItem
from marketplace.errors import MarketplaceError
from marketplace.order.lookup import orders_where

scenarios("features/checkout.feature")


@pytest.fixture()
def world():
    return {"vendors": {}, "products": {}, "result": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered user")
def registered_user(world, make_profile):
    world["user_id"] = make_profile()


@given(parsers.cfparse('vendor "{vendor}" sells "{product}" for {price:d}'))
def vendor_sells(world, make_profile, make_menu_item, vendor, product, price):
    if vendor not in world["vendors"]:
        world["vendors"][vendor] = make_profile(role="vendor")
    vendor_id = world["vendors"][vendor]
    world["products"][product] = make_menu_item(vendor_id, title=product, price=float(price))


@given(parsers.cfparse('the user adds {quantity:d} of "{product}" from "{vendor}" to the cart'))
def user_adds(world, add_to_cart, quantity, product, vendor):
    add_to_cart(world["user_id"], world["vendors"][vendor], world["products"][product], quantity=quantity)


@given(parsers.cfparse('vendor "{vendor}" removes "{product}" from the menu'))
def vendor_removes(world, vendor, product):
    current_domain.process(
        DeleteMenuItem(actor_id=world["vendors"][vendor], menu_item_id=world["products"][product]),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the user checks out")
def user_checks_out(world, checkout):
    try:
        world["result"] = checkout(world["user_id"])
    except MarketplaceError as exc:
        world["error"] = exc


@when(parsers.cfparse('the user checks out with delivery to "{landmark}"'))
def user_checks_out_with_delivery(world, checkout, landmark):
    world["result"] = checkout(world["user_id"], delivery_landmark=landmark)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("{count:d} orders are placed in one checkout batch"))
@then(parsers.cfparse("{count:d} order is placed in one checkout batch"))
def orders_placed(world, count):
    orders = orders_where(user_id=world["user_id"])
    assert len(orders) == count
    assert {str(o.checkout_batch_id) for o in orders} == {world["result"]["checkout_batch_id"]}


@then(parsers.cfparse('the order for "{product}" totals {total:d}'))
def order_totals(world, product, total):
    order = next(o for o in orders_where(user_id=world["user_id"]) if str(o.product_id) == world["products"][product])
    assert order.total == float(total)


@then("the cart is empty")
def cart_is_empty(world):
    assert find_cart(world["user_id"]).lines == []


@then(parsers.cfparse('the checkout fails with "{code}"'))
def checkout_fails(world, code):
    assert world["error"] is not None
    assert world["error"].code == code


@then("no orders are placed")
def no_orders(world):
    assert orders_where(user_id=world["user_id"]) == []


@then(parsers.cfparse("the cart still has {count:d} lines"))
def cart_still_has(world, count):
    assert len(find_cart(world["user_id"]).lines) == count
