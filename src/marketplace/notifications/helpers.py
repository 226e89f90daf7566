"""Notification fan-out helpers.

``notify`` is the plain insert: it refuses unknown recipients. ``fan_out``
is what event handlers call. A status change has already been committed by
the time handlers run, so a notification that cannot be written must never
undo or fail it: every failure is logged and skipped.
"""

import structlog
from protean.utils.globals import current_domain

from marketplace.errors import NotFound
from marketplace.identity.lookup import admin_ids, find_profile
from marketplace.notifications.notification import Notification

logger = structlog.get_logger(__name__)


def short_id(identifier) -> str:
    return str(identifier)[:8]


def notify(recipient_id, notification_type: str, title: str, message: str, context: dict | None = None) -> str:
    """Create one notification for an existing profile. Returns its id."""
    if find_profile(recipient_id) is None:
        raise NotFound(f"Recipient {recipient_id} not found", recipient_id=str(recipient_id))

    notification = Notification.create(
        recipient_id=str(recipient_id),
        notification_type=notification_type,
        title=title,
        message=message,
        context=context,
    )
    current_domain.repository_for(Notification).add(notification)
    return str(notification.id)


def fan_out(
    recipient_ids,
    notification_type: str,
    title: str,
    message: str,
    context: dict | None = None,
) -> list[str]:
    """Best-effort notify every recipient; failures are logged, never raised."""
    created = []
    for recipient_id in dict.fromkeys(str(r) for r in recipient_ids if r):
        try:
            created.append(notify(recipient_id, notification_type, title, message, context))
        except Exception:
            logger.exception(
                "Notification fan-out failed",
                recipient_id=recipient_id,
                notification_type=notification_type,
            )

    logger.debug(
        "Notifications fanned out",
        notification_type=notification_type,
        count=len(created),
    )
    return created


def fan_out_to_admins(notification_type: str, title: str, message: str, context: dict | None = None) -> list[str]:
    try:
        recipients = admin_ids()
    except Exception:
        logger.exception("Could not look up admins", notification_type=notification_type)
        return []
    return fan_out(recipients, notification_type, title, message, context)
