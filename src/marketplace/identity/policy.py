"""Access policy: one table deciding who may do what.

Each action names the roles allowed to perform it and whether the caller
must own the target. Admins pass every role check and bypass ownership,
except on actions marked ``admin_bypass=False`` (reading someone else's
notifications stays private even to admins).
"""

from dataclasses import dataclass

import structlog

from marketplace.errors import Forbidden
from marketplace.identity.profile import Profile, Role

logger = structlog.get_logger(__name__)

_ANY_ROLE = frozenset(Role)


@dataclass(frozen=True)
class Rule:
    roles: frozenset
    owner_required: bool = False
    admin_bypass: bool = True


POLICY: dict[str, Rule] = {
    # Profiles
    "profile.update": Rule(_ANY_ROLE, owner_required=True),
    "profile.change_role": Rule(frozenset({Role.ADMIN})),
    "profile.review_rider": Rule(frozenset({Role.ADMIN})),
    "rider.set_availability": Rule(frozenset({Role.RIDER}), owner_required=True, admin_bypass=False),
    # Catalog
    "menu_item.create": Rule(frozenset({Role.VENDOR}), owner_required=True, admin_bypass=False),
    "menu_item.update": Rule(frozenset({Role.VENDOR}), owner_required=True),
    "menu_item.delete": Rule(frozenset({Role.VENDOR}), owner_required=True),
    # Cart and checkout
    "cart.edit": Rule(_ANY_ROLE, owner_required=True, admin_bypass=False),
    "cart.checkout": Rule(_ANY_ROLE, owner_required=True, admin_bypass=False),
    # Orders
    "order.vendor_transition": Rule(frozenset({Role.VENDOR}), owner_required=True),
    "order.cancel": Rule(_ANY_ROLE, owner_required=True),
    "order.set_delivery": Rule(_ANY_ROLE, owner_required=True, admin_bypass=False),
    "order.view": Rule(_ANY_ROLE, owner_required=True),
    # Payments
    "payment.initialize": Rule(_ANY_ROLE, owner_required=True, admin_bypass=False),
    # Delivery
    "delivery.create": Rule(frozenset({Role.VENDOR}), owner_required=True),
    "delivery.accept": Rule(frozenset({Role.RIDER}), admin_bypass=False),
    "delivery.progress": Rule(frozenset({Role.RIDER}), owner_required=True, admin_bypass=False),
    # Notifications
    "notification.read": Rule(_ANY_ROLE, owner_required=True, admin_bypass=False),
}


def is_allowed(actor: Profile, action: str, owner_id=None) -> bool:
    rule = POLICY[action]
    role = Role(actor.role)

    if role == Role.ADMIN and rule.admin_bypass:
        return True
    if role not in rule.roles:
        return False
    if rule.owner_required and (owner_id is None or str(owner_id) != str(actor.id)):
        return False
    return True


def authorize(actor: Profile, action: str, owner_id=None) -> None:
    """Raise ``Forbidden`` unless ``actor`` may perform ``action`` on a target owned by ``owner_id``."""
    if not is_allowed(actor, action, owner_id):
        logger.info(
            "Access denied",
            actor_id=str(actor.id),
            role=actor.role,
            action=action,
            owner_id=str(owner_id) if owner_id is not None else None,
        )
        raise Forbidden(f"Not allowed to perform '{action}'", action=action)
