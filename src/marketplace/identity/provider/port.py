"""Identity provider port.

Authentication is delegated to a hosted identity provider. The marketplace
only needs one question answered: which principal does this bearer token
belong to? Adapters answer it for development/tests (FakeIdentityProvider)
and for deployments that hand out long-lived API tokens
(StaticTokenIdentityProvider).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """An authenticated caller as reported by the identity provider."""

    id: str
    email: str | None = None


class IdentityProvider(ABC):
    @abstractmethod
    def resolve(self, token: str) -> Principal | None:
        """Return the principal owning ``token``, or None if the token is not valid."""
        ...
