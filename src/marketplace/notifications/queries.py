"""Read side of notifications."""

from protean.utils.globals import current_domain

from marketplace.notifications.notification import Notification


def list_notifications(recipient_id, unread_only: bool = False) -> list[Notification]:
    """A recipient's notifications, newest first."""
    filters = {"recipient_id": str(recipient_id)}
    if unread_only:
        filters["is_read"] = False
    items = current_domain.repository_for(Notification)._dao.query.filter(**filters).all().items
    return sorted(items, key=lambda n: n.created_at.timestamp() if n.created_at else 0.0, reverse=True)


def unread_count(recipient_id) -> int:
    return len(list_notifications(recipient_id, unread_only=True))
