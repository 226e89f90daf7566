"""Paystack payment gateway adapter.

Talks to the Paystack REST API over HTTPS:
- POST /transaction/initialize  (amount in kobo, optionally split with a vendor subaccount)
- GET  /transaction/verify/{reference}
Webhooks are signed with HMAC-SHA512 of the raw body using the secret key,
delivered in the ``x-paystack-signature`` header.
"""

import hashlib
import hmac

import httpx
import structlog

from marketplace.payments.gateway.port import (
    InitializationResult,
    PaymentGateway,
    VerificationResult,
)

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.paystack.co"


def to_kobo(amount: float) -> int:
    return int(round(amount * 100))


def sign_payload(secret_key: str, payload: bytes) -> str:
    return hmac.new(secret_key.encode("utf-8"), payload, hashlib.sha512).hexdigest()


class PaystackGateway(PaymentGateway):
    """Production Paystack gateway adapter."""

    def __init__(
        self,
        secret_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.secret_key = secret_key.strip()
        self.client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {self.secret_key}",
                "Content-Type": "application/json",
            },
        )

    def initialize_transaction(
        self,
        reference: str,
        amount: float,
        email: str,
        callback_url: str | None = None,
        metadata: dict | None = None,
        subaccount: str | None = None,
        transaction_charge: float | None = None,
    ) -> InitializationResult:
        payload = {
            "reference": reference,
            "amount": to_kobo(amount),
            "email": email,
            "currency": "NGN",
        }
        if callback_url:
            payload["callback_url"] = callback_url
        if metadata:
            payload["metadata"] = metadata
        if subaccount:
            payload["subaccount"] = subaccount
            payload["transaction_charge"] = to_kobo(transaction_charge or 0.0)
            # The platform absorbs gateway fees so the vendor receives its full share
            payload["bearer"] = "account"

        try:
            response = self.client.post("/transaction/initialize", json=payload)
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Paystack initialize failed", reference=reference, error=str(exc))
            return InitializationResult(success=False, failure_reason=str(exc))

        if response.status_code >= 400 or not body.get("status"):
            return InitializationResult(
                success=False,
                failure_reason=body.get("message", "Transaction initialization failed"),
            )

        data = body.get("data") or {}
        return InitializationResult(
            success=True,
            authorization_url=data.get("authorization_url"),
            access_code=data.get("access_code"),
        )

    def verify_transaction(self, reference: str) -> VerificationResult:
        try:
            response = self.client.get(f"/transaction/verify/{reference}")
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Paystack verify failed", reference=reference, error=str(exc))
            return VerificationResult(success=False, failure_reason=str(exc))

        data = body.get("data") or {}
        gateway_status = data.get("status")
        if response.status_code >= 400 or not body.get("status") or gateway_status != "success":
            return VerificationResult(
                success=False,
                gateway_status=gateway_status,
                failure_reason=data.get("gateway_response") or body.get("message", "Payment verification failed"),
            )

        amount = data.get("amount")
        return VerificationResult(
            success=True,
            gateway_transaction_id=str(data.get("id")) if data.get("id") is not None else None,
            gateway_status=gateway_status,
            amount=amount / 100 if amount is not None else None,
        )

    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        if not signature:
            return False
        return hmac.compare_digest(sign_payload(self.secret_key, payload), signature)
