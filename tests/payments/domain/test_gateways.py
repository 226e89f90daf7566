"""Tests for the payment gateway port and its adapters."""

import json

import httpx

from marketplace.payments.gateway import get_gateway, reset_gateway, set_gateway
from marketplace.payments.gateway.fake_adapter import FakeGateway
from marketplace.payments.gateway.paystack_adapter import PaystackGateway, sign_payload


class TestFakeGateway:
    def test_initialize_records_call(self):
        gateway = FakeGateway()
        result = gateway.initialize_transaction(reference="MKT-1", amount=1000.0, email="a@example.com")
        assert result.success is True
        assert result.authorization_url.endswith("/MKT-1")
        assert gateway.calls_to("initialize_transaction")[0]["amount"] == 1000.0

    def test_verification_can_be_made_to_fail(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Insufficient funds")
        result = gateway.verify_transaction("MKT-1")
        assert result.success is False
        assert result.failure_reason == "Insufficient funds"

    def test_reports_configured_paid_amount(self):
        gateway = FakeGateway()
        assert gateway.verify_transaction("MKT-1").amount is None

        gateway.configure(should_succeed=True, paid_amount=2500.0)
        assert gateway.verify_transaction("MKT-1").amount == 2500.0

    def test_webhook_signature(self):
        gateway = FakeGateway()
        assert gateway.verify_webhook_signature(b"{}", "test-signature")
        assert not gateway.verify_webhook_signature(b"{}", "forged")


def _paystack(handler):
    client = httpx.Client(base_url="https://paystack.test", transport=httpx.MockTransport(handler))
    return PaystackGateway(secret_key="sk_test_123", client=client)


class TestPaystackGateway:
    def test_initialize_sends_amount_in_kobo(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"status": True, "data": {"authorization_url": "https://pay.test/x", "access_code": "acc"}},
            )

        result = _paystack(handler).initialize_transaction(reference="MKT-1", amount=1500.5, email="a@example.com")

        assert result.success is True
        assert result.authorization_url == "https://pay.test/x"
        assert seen["path"] == "/transaction/initialize"
        assert seen["body"]["amount"] == 150050
        assert seen["body"]["currency"] == "NGN"

    def test_initialize_splits_with_vendor_subaccount(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"status": True, "data": {"authorization_url": "https://pay.test/x"}})

        _paystack(handler).initialize_transaction(
            reference="MKT-1",
            amount=4000.0,
            email="a@example.com",
            subaccount="ACCT_kitchen",
            transaction_charge=1750.0,
        )

        assert seen["body"]["subaccount"] == "ACCT_kitchen"
        assert seen["body"]["transaction_charge"] == 175000
        assert seen["body"]["bearer"] == "account"

    def test_initialize_without_subaccount_sends_no_split(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"status": True, "data": {"authorization_url": "https://pay.test/x"}})

        _paystack(handler).initialize_transaction(reference="MKT-1", amount=10.0, email="a@example.com")
        assert "subaccount" not in seen["body"]
        assert "transaction_charge" not in seen["body"]

    def test_initialize_failure(self):
        def handler(request):
            return httpx.Response(400, json={"status": False, "message": "Invalid key"})

        result = _paystack(handler).initialize_transaction(reference="MKT-1", amount=10.0, email="a@example.com")
        assert result.success is False
        assert result.failure_reason == "Invalid key"

    def test_verify_success(self):
        def handler(request):
            assert request.url.path == "/transaction/verify/MKT-1"
            return httpx.Response(200, json={"status": True, "data": {"status": "success", "id": 42, "amount": 350000}})

        result = _paystack(handler).verify_transaction("MKT-1")
        assert result.success is True
        assert result.gateway_transaction_id == "42"
        assert result.amount == 3500.0

    def test_verify_abandoned(self):
        def handler(request):
            return httpx.Response(
                200, json={"status": True, "data": {"status": "abandoned", "gateway_response": "Abandoned"}}
            )

        result = _paystack(handler).verify_transaction("MKT-1")
        assert result.success is False
        assert result.failure_reason == "Abandoned"

    def test_network_error_is_a_failed_result(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        assert _paystack(handler).verify_transaction("MKT-1").success is False

    def test_webhook_signature(self):
        gateway = PaystackGateway(secret_key="sk_test_123", client=httpx.Client())
        payload = b'{"event":"charge.success"}'
        assert gateway.verify_webhook_signature(payload, sign_payload("sk_test_123", payload))
        assert not gateway.verify_webhook_signature(payload, sign_payload("other", payload))
        assert not gateway.verify_webhook_signature(payload, "")


class TestFactory:
    def test_fake_without_secret(self, monkeypatch):
        monkeypatch.delenv("PAYSTACK_SECRET_KEY", raising=False)
        reset_gateway()
        assert isinstance(get_gateway(), FakeGateway)

    def test_paystack_with_secret(self, monkeypatch):
        monkeypatch.setenv("PAYSTACK_SECRET_KEY", "sk_test_123")
        reset_gateway()
        assert isinstance(get_gateway(), PaystackGateway)

    def test_override(self):
        gateway = FakeGateway()
        set_gateway(gateway)
        assert get_gateway() is gateway
