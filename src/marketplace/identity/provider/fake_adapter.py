"""Fake identity provider for development and testing.

Tokens registered through ``issue()`` resolve to their principal. Any other
non-empty token is treated as the principal id itself, so a test client can
simply send ``Authorization: Bearer <profile id>``. Setting ``strict`` turns
that fallback off.
"""

from uuid import uuid4

from marketplace.identity.provider.port import IdentityProvider, Principal


class FakeIdentityProvider(IdentityProvider):
    def __init__(self, strict: bool = False) -> None:
        self.strict = strict
        self.tokens: dict[str, Principal] = {}

    def issue(self, principal_id: str, email: str | None = None) -> str:
        token = f"fake_tok_{uuid4().hex[:16]}"
        self.tokens[token] = Principal(id=principal_id, email=email)
        return token

    def revoke(self, token: str) -> None:
        self.tokens.pop(token, None)

    def resolve(self, token: str) -> Principal | None:
        if not token:
            return None
        if token in self.tokens:
            return self.tokens[token]
        if self.strict:
            return None
        return Principal(id=token)
