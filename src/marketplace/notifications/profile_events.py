"""Notifications react to Profile events: the rider approval loop."""

from protean.utils.mixins import handle

from marketplace.domain import marketplace
from marketplace.identity.events import ProfileRegistered, ProfileRoleChanged, RiderReviewed
from marketplace.identity.profile import ApprovalStatus, Role
from marketplace.notifications.helpers import fan_out, fan_out_to_admins
from marketplace.notifications.notification import Notification, NotificationType


def _ask_admins_to_review(profile_id, display_name):
    fan_out_to_admins(
        NotificationType.RIDER_APPLICATION.value,
        "Rider awaiting approval",
        f"{display_name or 'A new rider'} has applied to deliver and is awaiting review",
        {"type": "profile", "profile_id": str(profile_id)},
    )


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::profile")
class ProfileNotificationsHandler:
    @handle(ProfileRegistered)
    def on_profile_registered(self, event: ProfileRegistered) -> None:
        if event.role == Role.RIDER.value:
            _ask_admins_to_review(event.profile_id, event.display_name)

    @handle(ProfileRoleChanged)
    def on_role_changed(self, event: ProfileRoleChanged) -> None:
        if event.new_role == Role.RIDER.value:
            _ask_admins_to_review(event.profile_id, None)

    @handle(RiderReviewed)
    def on_rider_reviewed(self, event: RiderReviewed) -> None:
        approved = event.approval_status == ApprovalStatus.APPROVED.value
        fan_out(
            [event.profile_id],
            NotificationType.RIDER_REVIEWED.value,
            "You're approved to deliver" if approved else "Rider application declined",
            "You can now accept delivery tasks."
            if approved
            else "Your rider application was not approved. Contact support for details.",
            {"type": "profile", "approval_status": event.approval_status},
        )
