"""Domain events for the Profile aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Profile")
class ProfileRegistered:
    """A principal from the identity provider registered a marketplace profile."""

    __version__ = 1

    profile_id: Identifier(required=True)
    role: String(required=True, max_length=20)
    display_name: String(max_length=150)
    approval_status: String(max_length=20)
    registered_at: DateTime(required=True)


@marketplace.event(part_of="Profile")
class ProfileUpdated:
    """Contact or address details of a profile changed."""

    __version__ = 1

    profile_id: Identifier(required=True)
    display_name: String(max_length=150)
    address: String(max_length=500)
    location: String(max_length=255)
    phone: String(max_length=30)


@marketplace.event(part_of="Profile")
class ProfileRoleChanged:
    """An admin moved a profile to a different role."""

    __version__ = 1

    profile_id: Identifier(required=True)
    previous_role: String(required=True, max_length=20)
    new_role: String(required=True, max_length=20)
    changed_by: Identifier(required=True)


@marketplace.event(part_of="Profile")
class RiderReviewed:
    """An admin approved or rejected a rider."""

    __version__ = 1

    profile_id: Identifier(required=True)
    approval_status: String(required=True, max_length=20)
    reviewed_by: Identifier(required=True)
    reviewed_at: DateTime(required=True)


@marketplace.event(part_of="Profile")
class RiderAvailabilityChanged:
    __version__ = 1

    profile_id: Identifier(required=True)
    is_available: Boolean(default=False)
