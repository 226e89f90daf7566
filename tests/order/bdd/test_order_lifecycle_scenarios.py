"""BDD tests for the order lifecycle."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from marketplace.errors import MarketplaceError
from marketplace.notifications.queries import list_notifications
from marketplace.order.lookup import get_order
from marketplace.order.transitions import CancelOrder, UpdateOrderStatus

scenarios("features/order_lifecycle.feature")


@pytest.fixture()
def world():
    return {"error": None}


def _vendor_update(world, status, expected_status=None):
    current_domain.process(
        UpdateOrderStatus(
            actor_id=world["vendor_id"],
            order_id=world["order_id"],
            vendor_id=world["vendor_id"],
            new_status=status,
            expected_status=expected_status,
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a pending order from a checkout")
def pending_order(world, placed_order):
    world["order_id"], world["user_id"], world["vendor_id"] = placed_order


@given(parsers.cfparse('the vendor moved the order to "{status:w}"'))
def vendor_moved(world, status):
    _vendor_update(world, status)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the vendor moves the order to "{status:w}" expecting "{expected:w}"'))
def vendor_moves_expecting(world, status, expected):
    try:
        _vendor_update(world, status, expected_status=expected)
    except MarketplaceError as exc:
        world["error"] = exc


@when(parsers.cfparse('the vendor moves the order to "{status:w}"'))
def vendor_moves(world, status):
    try:
        _vendor_update(world, status)
    except MarketplaceError as exc:
        world["error"] = exc


@when("the user cancels the order")
def user_cancels(world):
    current_domain.process(
        CancelOrder(actor_id=world["user_id"], order_id=world["order_id"], reason="Too slow"),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status:w}"'))
def order_status_is(world, status):
    assert get_order(world["order_id"]).status == status


@then(parsers.cfparse('the request fails with "{code}"'))
def request_fails(world, code):
    assert world["error"] is not None
    assert world["error"].code == code


@then("the vendor is notified of the cancellation")
def vendor_notified(world):
    types = [n.notification_type for n in list_notifications(world["vendor_id"])]
    assert types == ["order_cancelled"]
