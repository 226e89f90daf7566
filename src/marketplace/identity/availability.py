"""Rider availability toggle."""

from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.identity.lookup import load_actor
from marketplace.identity.policy import authorize
from marketplace.identity.profile import Profile


@marketplace.command(part_of="Profile")
class SetRiderAvailability:
    actor_id: Identifier(required=True)
    is_available: Boolean(default=False)


@marketplace.command_handler(part_of=Profile)
class RiderAvailabilityHandler:
    @handle(SetRiderAvailability)
    def set_availability(self, command):
        actor = load_actor(command.actor_id)
        authorize(actor, "rider.set_availability", owner_id=actor.id)

        actor.set_availability(command.is_available)
        current_domain.repository_for(Profile).add(actor)
