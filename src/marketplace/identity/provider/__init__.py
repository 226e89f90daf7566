"""Identity provider factory.

Provides get_identity_provider() / set_identity_provider() to swap
implementations:
- StaticTokenIdentityProvider when MARKETPLACE_API_TOKENS is configured
- FakeIdentityProvider otherwise (development and testing)
"""

import os

from marketplace.identity.provider.fake_adapter import FakeIdentityProvider
from marketplace.identity.provider.port import IdentityProvider, Principal
from marketplace.identity.provider.static_adapter import StaticTokenIdentityProvider

__all__ = [
    "FakeIdentityProvider",
    "IdentityProvider",
    "Principal",
    "StaticTokenIdentityProvider",
    "get_identity_provider",
    "reset_identity_provider",
    "set_identity_provider",
]

_current_provider: IdentityProvider | None = None


def get_identity_provider() -> IdentityProvider:
    """Return the active identity provider, building it from the environment on first use."""
    global _current_provider
    if _current_provider is None:
        raw_tokens = os.getenv("MARKETPLACE_API_TOKENS")
        if raw_tokens:
            _current_provider = StaticTokenIdentityProvider.from_string(raw_tokens)
        else:
            _current_provider = FakeIdentityProvider()
    return _current_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    """Override the active identity provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_identity_provider() -> None:
    global _current_provider
    _current_provider = None
