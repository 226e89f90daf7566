"""FastAPI endpoints for the caller's notifications."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from marketplace.api.dependencies import current_actor, principal_id
from marketplace.api.schemas import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationSchema,
    SuccessResponse,
)
from marketplace.identity.profile import Profile
from marketplace.notifications.queries import list_notifications, unread_count
from marketplace.notifications.reading import MarkAllNotificationsRead, MarkNotificationRead

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def get_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"), actor: Profile = Depends(current_actor)
) -> NotificationListResponse:
    notifications = list_notifications(actor.id, unread_only=unread_only)
    return NotificationListResponse(
        notifications=[
            NotificationSchema(
                id=str(n.id),
                notification_type=n.notification_type,
                title=n.title,
                message=n.message,
                is_read=bool(n.is_read),
                context=n.context,
            )
            for n in notifications
        ],
        unread_count=unread_count(actor.id),
    )


@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(caller: str = Depends(principal_id)) -> MarkAllReadResponse:
    updated = current_domain.process(MarkAllNotificationsRead(actor_id=caller), asynchronous=False)
    return MarkAllReadResponse(updated=updated)


@router.put("/{notification_id}/read", response_model=SuccessResponse)
async def mark_read(notification_id: str, caller: str = Depends(principal_id)) -> SuccessResponse:
    current_domain.process(
        MarkNotificationRead(actor_id=caller, notification_id=notification_id),
        asynchronous=False,
    )
    return SuccessResponse()
