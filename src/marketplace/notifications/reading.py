"""Read state of notifications: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import NotFound
from marketplace.identity.lookup import load_actor
from marketplace.identity.policy import authorize
from marketplace.notifications.notification import Notification


@marketplace.command(part_of="Notification")
class MarkNotificationRead:
    actor_id = Identifier(required=True)
    notification_id = Identifier(required=True)


@marketplace.command(part_of="Notification")
class MarkAllNotificationsRead:
    actor_id = Identifier(required=True)


@marketplace.command_handler(part_of=Notification)
class NotificationReadingHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command):
        actor = load_actor(command.actor_id)
        repo = current_domain.repository_for(Notification)
        try:
            notification = repo.get(str(command.notification_id))
        except ObjectNotFoundError:
            raise NotFound(
                f"Notification {command.notification_id} not found",
                notification_id=str(command.notification_id),
            ) from None

        authorize(actor, "notification.read", owner_id=notification.recipient_id)

        if notification.mark_read():
            repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command):
        actor = load_actor(command.actor_id)
        repo = current_domain.repository_for(Notification)

        unread = repo._dao.query.filter(recipient_id=str(actor.id), is_read=False).all().items
        for notification in unread:
            notification.mark_read()
            repo.add(notification)
        return len(unread)
