"""Request dependencies: who is calling.

Every authenticated endpoint receives the caller's principal id, resolved
from ``Authorization: Bearer <token>`` by the configured identity provider.
Whether that principal may act at all is decided by the command handlers.
"""

from fastapi import Header

from marketplace.errors import Unauthenticated
from marketplace.identity.lookup import load_actor
from marketplace.identity.profile import Profile
from marketplace.identity.provider import get_identity_provider
from marketplace.utils.logging import add_context


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def principal_id(authorization: str | None = Header(default=None)) -> str:
    token = _bearer_token(authorization)
    principal = get_identity_provider().resolve(token) if token else None
    if principal is None:
        raise Unauthenticated("Authentication required")

    add_context(principal_id=principal.id)
    return principal.id


async def current_actor(authorization: str | None = Header(default=None)) -> Profile:
    """Resolve the caller to a registered profile (403 when unregistered)."""
    return load_actor(await principal_id(authorization))
