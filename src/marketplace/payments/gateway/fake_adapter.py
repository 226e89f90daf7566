"""Configurable fake payment gateway for development and testing.

Simulates the gateway without any external calls. It can be told to
succeed or fail at runtime and records every call it receives, which
lets tests assert how often verification actually happened.
"""

from uuid import uuid4

from marketplace.payments.gateway.port import (
    InitializationResult,
    PaymentGateway,
    VerificationResult,
)


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Transaction declined"
        self.paid_amount: float | None = None
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Transaction declined",
        paid_amount: float | None = None,
    ) -> None:
        """Configure gateway behavior at runtime.

        ``paid_amount`` is what verification reports as actually charged;
        left as None the fake reports no amount at all.
        """
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.paid_amount = paid_amount

    def calls_to(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]

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
        self.calls.append(
            {
                "method": "initialize_transaction",
                "reference": reference,
                "amount": amount,
                "email": email,
                "callback_url": callback_url,
                "metadata": metadata,
                "subaccount": subaccount,
                "transaction_charge": transaction_charge,
            }
        )
        return InitializationResult(
            success=True,
            authorization_url=f"https://checkout.fake-gateway.test/{reference}",
            access_code=f"fake_acc_{uuid4().hex[:12]}",
        )

    def verify_transaction(self, reference: str) -> VerificationResult:
        self.calls.append({"method": "verify_transaction", "reference": reference})

        if self.should_succeed:
            return VerificationResult(
                success=True,
                gateway_transaction_id=f"fake_txn_{uuid4().hex[:12]}",
                gateway_status="success",
                amount=self.paid_amount,
            )
        return VerificationResult(
            success=False,
            gateway_status="failed",
            failure_reason=self.failure_reason,
        )

    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:  # noqa: ARG002
        return signature == "test-signature"
