"""Payment gateway port (abstract interface).

Defines the contract every gateway adapter implements, so FakeGateway
(dev/test) and PaystackGateway (production) are interchangeable without
touching domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class InitializationResult:
    """Result of asking the gateway to start a hosted checkout."""

    success: bool
    authorization_url: str | None = None
    access_code: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class VerificationResult:
    """Result of asking the gateway whether a transaction went through."""

    success: bool
    gateway_transaction_id: str | None = None
    gateway_status: str | None = None
    amount: float | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
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
        """Start a transaction and return the URL the payer is sent to.

        When ``subaccount`` is given the gateway settles the charge to that
        vendor account and keeps ``transaction_charge`` for the platform.
        """
        ...

    @abstractmethod
    def verify_transaction(self, reference: str) -> VerificationResult:
        """Check with the gateway whether the transaction was paid."""
        ...

    @abstractmethod
    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        """Verify that a webhook payload is authentically from the gateway."""
        ...
