"""Admin-only profile moderation: role changes and rider review."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.identity.lookup import get_profile, load_actor
from marketplace.identity.policy import authorize
from marketplace.identity.profile import ApprovalStatus, Profile, Role


@marketplace.command(part_of="Profile")
class ChangeRole:
    actor_id: Identifier(required=True)
    profile_id: Identifier(required=True)
    new_role: String(required=True, choices=Role)


@marketplace.command(part_of="Profile")
class ReviewRider:
    """Approve or reject a rider. Only approved riders may accept delivery tasks."""

    actor_id: Identifier(required=True)
    profile_id: Identifier(required=True)
    approval_status: String(required=True, choices=ApprovalStatus)


@marketplace.command_handler(part_of=Profile)
class ProfileAdministrationHandler:
    @handle(ChangeRole)
    def change_role(self, command):
        actor = load_actor(command.actor_id)
        authorize(actor, "profile.change_role")

        profile = get_profile(command.profile_id)
        profile.change_role(command.new_role, changed_by=str(actor.id))
        current_domain.repository_for(Profile).add(profile)

    @handle(ReviewRider)
    def review_rider(self, command):
        actor = load_actor(command.actor_id)
        authorize(actor, "profile.review_rider")

        profile = get_profile(command.profile_id)
        profile.review_rider(command.approval_status, reviewed_by=str(actor.id))
        current_domain.repository_for(Profile).add(profile)
