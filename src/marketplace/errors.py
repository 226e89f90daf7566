"""Business error taxonomy for the marketplace.

Every error carries a stable ``code`` and the HTTP ``status_code`` the API
boundary answers with. They derive from Protean's ``ProteanException`` so
command handlers raise them the same way they raise ``ValidationError``,
and the unit of work rolls back on any of them.
"""

from protean.exceptions import ProteanException


class MarketplaceError(ProteanException):
    code = "internal_error"
    status_code = 500

    def __init__(self, message: str, **details):
        self.message = message
        self.details = details
        super().__init__({"error": [message]})

    def __str__(self) -> str:
        return self.message


class Unauthenticated(MarketplaceError):
    code = "unauthenticated"
    status_code = 401


class Forbidden(MarketplaceError):
    code = "forbidden"
    status_code = 403


class NotFound(MarketplaceError):
    code = "not_found"
    status_code = 404


class InvalidTransition(MarketplaceError):
    code = "invalid_transition"
    status_code = 400


class AlreadyExists(MarketplaceError):
    code = "already_exists"
    status_code = 409


class Conflict(MarketplaceError):
    """The stored state moved on since the caller last read it."""

    code = "conflict"
    status_code = 409


class EmptyCart(MarketplaceError):
    code = "empty_cart"
    status_code = 400


class MissingAddress(MarketplaceError):
    code = "missing_address"
    status_code = 400


class InvalidReference(MarketplaceError):
    """A cart line points at a vendor or product that no longer exists."""

    code = "invalid_reference"
    status_code = 400
