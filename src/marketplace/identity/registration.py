"""Profile registration and self-service updates: commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import AlreadyExists
from marketplace.identity.lookup import find_profile, load_actor
from marketplace.identity.policy import authorize
from marketplace.identity.profile import Profile, Role


@marketplace.command(part_of="Profile")
class RegisterProfile:
    """Create the marketplace profile for a freshly authenticated principal."""

    profile_id: Identifier(required=True)
    role: String(max_length=20, default=Role.USER.value)
    display_name: String(max_length=150)
    email: String(max_length=254)
    address: String(max_length=500)
    location: String(max_length=255)
    phone: String(max_length=30)
    subaccount_code: String(max_length=100)


@marketplace.command(part_of="Profile")
class UpdateProfile:
    """Change contact and address details. Fields left unset keep their current value."""

    actor_id: Identifier(required=True)
    profile_id: Identifier(required=True)
    display_name: String(max_length=150)
    email: String(max_length=254)
    address: String(max_length=500)
    location: String(max_length=255)
    phone: String(max_length=30)
    subaccount_code: String(max_length=100)


_UPDATABLE_FIELDS = ("display_name", "email", "address", "location", "phone", "subaccount_code")


@marketplace.command_handler(part_of=Profile)
class ProfileRegistrationHandler:
    @handle(RegisterProfile)
    def register_profile(self, command):
        if find_profile(command.profile_id) is not None:
            raise AlreadyExists(
                f"Profile {command.profile_id} is already registered",
                profile_id=str(command.profile_id),
            )

        profile = Profile.register(
            profile_id=str(command.profile_id),
            role=command.role or Role.USER.value,
            display_name=command.display_name,
            email=command.email,
            address=command.address,
            location=command.location,
            phone=command.phone,
            subaccount_code=command.subaccount_code,
        )
        current_domain.repository_for(Profile).add(profile)
        return str(profile.id)

    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(Profile)
        actor = load_actor(command.actor_id)
        authorize(actor, "profile.update", owner_id=command.profile_id)

        profile = repo.get(str(command.profile_id))
        changes = {
            field: getattr(command, field) for field in _UPDATABLE_FIELDS if getattr(command, field) is not None
        }
        profile.update_details(**changes)
        repo.add(profile)
