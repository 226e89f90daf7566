"""Profile aggregate: the marketplace's view of an authenticated principal.

Authentication lives with the hosted identity provider; a Profile is keyed
by the provider's principal id and carries the one role that gates every
other part of the marketplace:

    user    places orders
    vendor  owns menu items and fulfils orders
    rider   delivers orders once an admin has approved them
    admin   moderates riders and roles, may act on any vendor's behalf

Riders alone carry an approval status (pending → approved | rejected).
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from marketplace.domain import marketplace
from marketplace.errors import InvalidTransition
from marketplace.identity.events import (
    ProfileRegistered,
    ProfileRoleChanged,
    ProfileUpdated,
    RiderAvailabilityChanged,
    RiderReviewed,
)

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class Role(Enum):
    USER = "user"
    VENDOR = "vendor"
    RIDER = "rider"
    ADMIN = "admin"


class ApprovalStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Roles a principal may pick for itself at registration
SELF_ASSIGNABLE_ROLES = {Role.USER, Role.VENDOR, Role.RIDER}


@marketplace.aggregate
class Profile:
    id: Identifier(identifier=True, required=True)
    role: String(choices=Role, required=True, default=Role.USER.value)
    display_name: String(max_length=150)
    email: String(max_length=254)
    address: String(max_length=500)
    location: String(max_length=255)
    phone: String(max_length=30)
    # Gateway settlement account a vendor's share of each charge is paid into
    subaccount_code: String(max_length=100)
    is_available: Boolean(default=False)
    approval_status: String(choices=ApprovalStatus)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def only_riders_carry_an_approval_status(self):
        if self.role != Role.RIDER.value and self.approval_status is not None:
            raise ValidationError({"approval_status": ["Only riders carry an approval status"]})

    @invariant.post
    def only_riders_can_be_available(self):
        if self.role != Role.RIDER.value and self.is_available:
            raise ValidationError({"is_available": ["Only riders can be marked available"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(
        cls,
        profile_id,
        role=Role.USER.value,
        display_name=None,
        email=None,
        address=None,
        location=None,
        phone=None,
        subaccount_code=None,
    ):
        if role not in {r.value for r in SELF_ASSIGNABLE_ROLES}:
            raise ValidationError({"role": [f"Role '{role}' cannot be self-assigned"]})

        now = datetime.now(UTC)
        approval_status = ApprovalStatus.PENDING.value if role == Role.RIDER.value else None

        profile = cls(
            id=profile_id,
            role=role,
            display_name=display_name,
            email=email,
            address=address,
            location=location,
            phone=phone,
            subaccount_code=subaccount_code,
            approval_status=approval_status,
            created_at=now,
            updated_at=now,
        )
        profile.raise_(
            ProfileRegistered(
                profile_id=profile_id,
                role=role,
                display_name=display_name,
                approval_status=approval_status,
                registered_at=now,
            )
        )
        return profile

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def has_role(self, role: Role) -> bool:
        return self.role == role.value

    @property
    def is_approved_rider(self) -> bool:
        return self.role == Role.RIDER.value and self.approval_status == ApprovalStatus.APPROVED.value

    @property
    def pickup_address(self):
        """Where riders collect a vendor's orders: the street address, else the location."""
        return self.address or self.location

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def update_details(
        self,
        display_name=_UNSET,
        email=_UNSET,
        address=_UNSET,
        location=_UNSET,
        phone=_UNSET,
        subaccount_code=_UNSET,
    ):
        if display_name is not _UNSET:
            self.display_name = display_name
        if email is not _UNSET:
            self.email = email
        if address is not _UNSET:
            self.address = address
        if location is not _UNSET:
            self.location = location
        if phone is not _UNSET:
            self.phone = phone
        if subaccount_code is not _UNSET:
            self.subaccount_code = subaccount_code
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProfileUpdated(
                profile_id=self.id,
                display_name=self.display_name,
                address=self.address,
                location=self.location,
                phone=self.phone,
            )
        )

    def change_role(self, new_role, changed_by):
        if new_role not in {r.value for r in Role}:
            raise ValidationError({"role": [f"Unknown role '{new_role}'"]})
        if self.role == new_role:
            raise InvalidTransition(f"Profile already has role '{new_role}'")

        previous_role = self.role
        with atomic_change(self):
            self.role = new_role
            self.is_available = False
            self.approval_status = ApprovalStatus.PENDING.value if new_role == Role.RIDER.value else None
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ProfileRoleChanged(
                profile_id=self.id,
                previous_role=previous_role,
                new_role=self.role,
                changed_by=changed_by,
            )
        )

    def review_rider(self, approval_status, reviewed_by):
        if self.role != Role.RIDER.value:
            raise InvalidTransition("Only rider profiles can be reviewed")
        if approval_status not in (ApprovalStatus.APPROVED.value, ApprovalStatus.REJECTED.value):
            raise ValidationError({"approval_status": ["A review must approve or reject the rider"]})

        now = datetime.now(UTC)
        self.approval_status = approval_status
        if approval_status == ApprovalStatus.REJECTED.value:
            self.is_available = False
        self.updated_at = now

        self.raise_(
            RiderReviewed(
                profile_id=self.id,
                approval_status=approval_status,
                reviewed_by=reviewed_by,
                reviewed_at=now,
            )
        )

    def set_availability(self, is_available: bool):
        if self.role != Role.RIDER.value:
            raise InvalidTransition("Only riders can change availability")

        self.is_available = is_available
        self.updated_at = datetime.now(UTC)

        self.raise_(
            RiderAvailabilityChanged(
                profile_id=self.id,
                is_available=is_available,
            )
        )
