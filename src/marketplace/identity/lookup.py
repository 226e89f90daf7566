"""Profile lookups shared by command handlers and event handlers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.errors import Forbidden, NotFound, Unauthenticated
from marketplace.identity.profile import ApprovalStatus, Profile, Role


def find_profile(profile_id) -> Profile | None:
    if not profile_id:
        return None
    try:
        return current_domain.repository_for(Profile).get(str(profile_id))
    except ObjectNotFoundError:
        return None


def get_profile(profile_id) -> Profile:
    profile = find_profile(profile_id)
    if profile is None:
        raise NotFound(f"Profile {profile_id} not found", profile_id=str(profile_id))
    return profile


def load_actor(actor_id) -> Profile:
    """Resolve the caller of a command to its profile.

    A command without a caller is unauthenticated; a caller the marketplace
    has never seen must register before doing anything else.
    """
    if not actor_id:
        raise Unauthenticated("Authentication required")
    profile = find_profile(actor_id)
    if profile is None:
        raise Forbidden("Register a profile before using the marketplace", actor_id=str(actor_id))
    return profile


def profiles_with_role(role: Role, **filters) -> list[Profile]:
    repo = current_domain.repository_for(Profile)
    return repo._dao.query.filter(role=role.value, **filters).all().items


def admin_ids() -> list[str]:
    return [str(p.id) for p in profiles_with_role(Role.ADMIN)]


def approved_rider_ids() -> list[str]:
    return [str(p.id) for p in profiles_with_role(Role.RIDER, approval_status=ApprovalStatus.APPROVED.value)]
