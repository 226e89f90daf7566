"""Static token identity provider.

Reads ``MARKETPLACE_API_TOKENS`` as a comma separated list of
``token:principal_id`` pairs, e.g.::

    MARKETPLACE_API_TOKENS="s3cr3t:vendor-1,0th3r:admin-1"
"""

import hmac

from marketplace.identity.provider.port import IdentityProvider, Principal


def parse_tokens(raw: str) -> dict[str, str]:
    tokens = {}
    for entry in raw.split(","):
        pair = entry.strip()
        if not pair:
            continue
        token, sep, principal_id = pair.partition(":")
        if not sep or not token.strip() or not principal_id.strip():
            raise ValueError(f"Malformed token entry {pair!r}; expected 'token:principal_id'")
        tokens[token.strip()] = principal_id.strip()
    return tokens


class StaticTokenIdentityProvider(IdentityProvider):
    def __init__(self, tokens: dict[str, str]) -> None:
        self.tokens = dict(tokens)

    @classmethod
    def from_string(cls, raw: str) -> "StaticTokenIdentityProvider":
        return cls(parse_tokens(raw))

    def resolve(self, token: str) -> Principal | None:
        if not token:
            return None
        for known, principal_id in self.tokens.items():
            if hmac.compare_digest(known, token):
                return Principal(id=principal_id)
        return None
