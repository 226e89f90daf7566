"""Application tests for splitting a cart into per-line orders."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.cart.lines import find_cart
from marketplace.catalog.management import DeleteMenuItem
from marketplace.errors import AlreadyExists, Conflict, EmptyCart, Forbidden, InvalidReference
from marketplace.notifications.queries import list_notifications
from marketplace.order.lookup import orders_where
from marketplace.order.order import Order, OrderStatus
from marketplace.payments.confirmation import ConfirmPayment
from marketplace.payments.initiation import InitializePayment
from marketplace.payments.payment import Payment


def _process(command):
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def user_id(make_profile):
    return make_profile(email="buyer@example.com")


@pytest.fixture()
def two_vendor_cart(user_id, make_profile, make_menu_item, add_to_cart):
    """Three lines: two from the first vendor, one from the second."""
    v1 = make_profile(role="vendor")
    v2 = make_profile(role="vendor")
    add_to_cart(user_id, v1, make_menu_item(v1, title="Rice", price=1000.0))
    add_to_cart(user_id, v1, make_menu_item(v1, title="Chicken", price=1500.0))
    add_to_cart(user_id, v2, make_menu_item(v2, title="Suya", price=500.0), quantity=2)
    return v1, v2


class TestCheckoutSplitsCart:
    def test_one_order_per_line_sharing_a_batch(self, user_id, two_vendor_cart, checkout):
        result = checkout(user_id)

        orders = orders_where(user_id=user_id)
        assert len(orders) == 3
        assert sorted(result["order_ids"]) == sorted(str(o.id) for o in orders)
        assert {str(o.checkout_batch_id) for o in orders} == {result["checkout_batch_id"]}
        assert all(o.status == OrderStatus.PENDING.value for o in orders)
        assert find_cart(user_id).lines == []

    def test_totals_without_delivery(self, user_id, two_vendor_cart, checkout):
        result = checkout(user_id)
        assert result["total"] == 3500.0

    def test_fee_charged_once_per_vendor(self, user_id, two_vendor_cart, checkout):
        v1, v2 = two_vendor_cart
        result = checkout(user_id, delivery_landmark="Amarata")

        orders = orders_where(user_id=user_id)
        fees_by_vendor = {}
        for order in orders:
            fees_by_vendor.setdefault(str(order.vendor_id), []).append(order.delivery_fee)
        assert sorted(fees_by_vendor[v1]) == [0.0, 1000.0]
        assert fees_by_vendor[v2] == [1000.0]
        assert result["total"] == 5500.0

    def test_delivery_details_stamped_on_orders(self, user_id, two_vendor_cart, checkout):
        checkout(user_id, delivery_landmark="igbogene", delivery_city="Yenagoa", delivery_state="Bayelsa")

        order = orders_where(user_id=user_id)[0]
        assert order.delivery.landmark == "Igbogene"
        assert order.delivery.zone == 4
        assert order.delivery_address == "4 Hospital Road, Yenagoa, Bayelsa"


class TestCheckoutFailures:
    def test_empty_cart(self, user_id, checkout):
        with pytest.raises(EmptyCart):
            checkout(user_id)
        assert orders_where(user_id=user_id) == []

    def test_stale_product_leaves_everything_untouched(self, user_id, two_vendor_cart, checkout):
        v1, _ = two_vendor_cart
        line = next(line for line in find_cart(user_id).lines if line.title == "Chicken")
        _process(DeleteMenuItem(actor_id=v1, menu_item_id=str(line.product_id)))

        with pytest.raises(InvalidReference):
            checkout(user_id)

        assert orders_where(user_id=user_id) == []
        assert len(find_cart(user_id).lines) == 3

    def test_unknown_landmark(self, user_id, two_vendor_cart, checkout):
        with pytest.raises(ValidationError):
            checkout(user_id, delivery_landmark="Lagos")
        assert len(find_cart(user_id).lines) == 3

    def test_failure_while_writing_orders_rolls_everything_back(
        self, user_id, two_vendor_cart, checkout, monkeypatch
    ):
        place = Order.place
        placed = []

        def place_then_fail(**kwargs):
            if placed:
                raise RuntimeError("Order store unavailable")
            placed.append(kwargs["product_id"])
            return place(**kwargs)

        monkeypatch.setattr(Order, "place", place_then_fail)

        with pytest.raises(RuntimeError):
            checkout(user_id)

        assert len(placed) == 1
        assert orders_where(user_id=user_id) == []
        assert len(find_cart(user_id).lines) == 3


class TestPrepaidCheckout:
    def test_confirmed_reference_places_paid_orders(self, user_id, two_vendor_cart, checkout, fake_gateway):
        v1, v2 = two_vendor_cart
        init = _process(InitializePayment(actor_id=user_id, delivery_landmark="Ekeki"))
        assert init["amount"] == 3500.0 + 2 * 1000.0

        _process(ConfirmPayment(reference=init["reference"], source="callback"))
        checkout(user_id, delivery_landmark="Ekeki", payment_reference=init["reference"])

        orders = orders_where(user_id=user_id)
        assert {o.status for o in orders} == {OrderStatus.PAID.value}
        assert len(list_notifications(v1)) == 2
        assert len(list_notifications(v2)) == 1

    def test_unconfirmed_reference_keeps_orders_pending(self, user_id, two_vendor_cart, checkout):
        checkout(user_id, payment_reference="MKT-UNKNOWN")
        assert {o.status for o in orders_where(user_id=user_id)} == {OrderStatus.PENDING.value}

    def test_prepayment_is_claimed_by_its_checkout(self, user_id, two_vendor_cart, checkout, fake_gateway):
        reference = _process(InitializePayment(actor_id=user_id))["reference"]
        _process(ConfirmPayment(reference=reference))

        result = checkout(user_id, payment_reference=reference)

        payment = current_domain.repository_for(Payment).get(reference)
        assert str(payment.checkout_batch_id) == result["checkout_batch_id"]

    def test_prepayment_covers_one_checkout_only(
        self, user_id, two_vendor_cart, checkout, make_menu_item, add_to_cart, fake_gateway
    ):
        v1, _ = two_vendor_cart
        reference = _process(InitializePayment(actor_id=user_id))["reference"]
        _process(ConfirmPayment(reference=reference))
        checkout(user_id, payment_reference=reference)

        add_to_cart(user_id, v1, make_menu_item(v1, title="Pepper Soup", price=50000.0))
        with pytest.raises(AlreadyExists):
            checkout(user_id, payment_reference=reference)

        assert len(orders_where(user_id=user_id)) == 3
        assert len(find_cart(user_id).lines) == 1

    def test_prepayment_must_match_the_cart(
        self, user_id, two_vendor_cart, checkout, make_menu_item, add_to_cart, fake_gateway
    ):
        v1, _ = two_vendor_cart
        reference = _process(InitializePayment(actor_id=user_id))["reference"]
        _process(ConfirmPayment(reference=reference))
        add_to_cart(user_id, v1, make_menu_item(v1, title="Pepper Soup", price=50000.0))

        with pytest.raises(Conflict):
            checkout(user_id, payment_reference=reference)

        assert orders_where(user_id=user_id) == []
        assert len(find_cart(user_id).lines) == 4
        assert current_domain.repository_for(Payment).get(reference).checkout_batch_id is None

    def test_fee_counts_towards_the_match(self, user_id, two_vendor_cart, checkout, fake_gateway):
        reference = _process(InitializePayment(actor_id=user_id, delivery_landmark="Ekeki"))["reference"]
        _process(ConfirmPayment(reference=reference))

        with pytest.raises(Conflict):
            checkout(user_id, payment_reference=reference)
        assert orders_where(user_id=user_id) == []

    def test_someone_elses_prepayment(
        self, user_id, two_vendor_cart, checkout, make_profile, make_menu_item, add_to_cart, fake_gateway
    ):
        v1, _ = two_vendor_cart
        reference = _process(InitializePayment(actor_id=user_id))["reference"]
        _process(ConfirmPayment(reference=reference))

        other = make_profile()
        add_to_cart(other, v1, make_menu_item(v1, title="Plantain", price=3500.0))
        with pytest.raises(Forbidden):
            checkout(other, payment_reference=reference)
        assert orders_where(user_id=other) == []
