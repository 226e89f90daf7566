import os
from pathlib import Path
from uuid import uuid4

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the marketplace domain by pushing its domain_context.
    The activated domain can then be referred to elsewhere as `current_domain`.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from marketplace.domain import marketplace

    marketplace.init()
    marketplace.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    from marketplace.identity.provider import reset_identity_provider
    from marketplace.payments.gateway import reset_gateway

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_gateway()
    reset_identity_provider()


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------
@pytest.fixture()
def fake_gateway():
    from marketplace.payments.gateway import set_gateway
    from marketplace.payments.gateway.fake_adapter import FakeGateway

    gateway = FakeGateway()
    set_gateway(gateway)
    return gateway


# ---------------------------------------------------------------------------
# Profile, menu and cart builders
# ---------------------------------------------------------------------------
def _process(command):
    from protean import current_domain

    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def make_profile():
    """Register a profile through the command and return its id."""
    from marketplace.identity.registration import RegisterProfile

    def _make(role="user", profile_id=None, **fields):
        profile_id = profile_id or f"{role}-{uuid4().hex[:8]}"
        fields.setdefault("display_name", profile_id)
        return _process(RegisterProfile(profile_id=profile_id, role=role, **fields))

    return _make


@pytest.fixture()
def make_admin():
    """Admins cannot self-register; store one directly."""
    from protean import current_domain

    from marketplace.identity.profile import Profile, Role

    def _make(profile_id=None):
        profile_id = profile_id or f"admin-{uuid4().hex[:8]}"
        current_domain.repository_for(Profile).add(
            Profile(id=profile_id, role=Role.ADMIN.value, display_name="Admin")
        )
        return profile_id

    return _make


@pytest.fixture()
def make_rider(make_profile, make_admin):
    """A rider reviewed by an admin and, by default, approved and available."""
    from marketplace.identity.administration import ReviewRider
    from marketplace.identity.availability import SetRiderAvailability

    def _make(profile_id=None, approved=True, available=True, admin_id=None):
        rider_id = make_profile(role="rider", profile_id=profile_id)
        if approved:
            reviewer = admin_id or make_admin()
            _process(ReviewRider(actor_id=reviewer, profile_id=rider_id, approval_status="approved"))
            if available:
                _process(SetRiderAvailability(actor_id=rider_id, is_available=True))
        return rider_id

    return _make


@pytest.fixture()
def make_menu_item():
    from marketplace.catalog.management import CreateMenuItem

    def _make(vendor_id, title="Jollof Rice", price=1000.0, **fields):
        return _process(CreateMenuItem(actor_id=vendor_id, vendor_id=vendor_id, title=title, price=price, **fields))

    return _make


@pytest.fixture()
def add_to_cart():
    from marketplace.cart.lines import AddCartLine

    def _add(user_id, vendor_id, product_id, quantity=1):
        return _process(AddCartLine(actor_id=user_id, vendor_id=vendor_id, product_id=product_id, quantity=quantity))

    return _add


@pytest.fixture()
def checkout():
    from marketplace.checkout.checkout import Checkout

    def _checkout(user_id, **fields):
        fields.setdefault("delivery_address", "4 Hospital Road")
        return _process(Checkout(actor_id=user_id, **fields))

    return _checkout


@pytest.fixture()
def pay_batch(fake_gateway):
    """Initialize and confirm payment for a checkout batch. Returns the reference."""
    from marketplace.payments.confirmation import ConfirmPayment
    from marketplace.payments.initiation import InitializePayment

    def _pay(user_id, checkout_batch_id, email="buyer@example.com"):
        result = _process(InitializePayment(actor_id=user_id, checkout_batch_id=checkout_batch_id, email=email))
        _process(ConfirmPayment(reference=result["reference"], source="callback"))
        return result["reference"]

    return _pay


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from marketplace.api import create_app

    return TestClient(create_app())


@pytest.fixture()
def auth():
    """Bearer headers for a profile id; the fake identity provider accepts the id as its own token."""

    def _headers(profile_id):
        return {"Authorization": f"Bearer {profile_id}"}

    return _headers
