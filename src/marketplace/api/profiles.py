"""FastAPI endpoints for profiles, roles and rider state."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from marketplace.api.dependencies import current_actor, principal_id
from marketplace.api.schemas import (
    ChangeRoleRequest,
    ProfileResponse,
    ProfileSchema,
    RegisterProfileRequest,
    ReviewRiderRequest,
    SetAvailabilityRequest,
    UpdateProfileRequest,
)
from marketplace.identity.administration import ChangeRole, ReviewRider
from marketplace.identity.availability import SetRiderAvailability
from marketplace.identity.lookup import get_profile
from marketplace.identity.profile import Profile
from marketplace.identity.registration import RegisterProfile, UpdateProfile

router = APIRouter(prefix="/profiles", tags=["profiles"])


def profile_schema(profile: Profile) -> ProfileSchema:
    return ProfileSchema(
        id=str(profile.id),
        role=profile.role,
        display_name=profile.display_name,
        email=profile.email,
        address=profile.address,
        location=profile.location,
        phone=profile.phone,
        subaccount_code=profile.subaccount_code,
        is_available=bool(profile.is_available),
        approval_status=profile.approval_status,
    )


@router.post("", status_code=201, response_model=ProfileResponse)
async def register_profile(body: RegisterProfileRequest, caller: str = Depends(principal_id)) -> ProfileResponse:
    command = RegisterProfile(
        profile_id=caller,
        role=body.role,
        display_name=body.display_name,
        email=body.email,
        address=body.address,
        location=body.location,
        phone=body.phone,
        subaccount_code=body.subaccount_code,
    )
    profile_id = current_domain.process(command, asynchronous=False)
    return ProfileResponse(profile=profile_schema(get_profile(profile_id)))


@router.get("/me", response_model=ProfileResponse)
async def my_profile(actor: Profile = Depends(current_actor)) -> ProfileResponse:
    return ProfileResponse(profile=profile_schema(actor))


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(body: UpdateProfileRequest, caller: str = Depends(principal_id)) -> ProfileResponse:
    command = UpdateProfile(
        actor_id=caller,
        profile_id=caller,
        display_name=body.display_name,
        email=body.email,
        address=body.address,
        location=body.location,
        phone=body.phone,
        subaccount_code=body.subaccount_code,
    )
    current_domain.process(command, asynchronous=False)
    return ProfileResponse(profile=profile_schema(get_profile(caller)))


@router.put("/me/availability", response_model=ProfileResponse)
async def set_availability(body: SetAvailabilityRequest, caller: str = Depends(principal_id)) -> ProfileResponse:
    current_domain.process(
        SetRiderAvailability(actor_id=caller, is_available=body.is_available),
        asynchronous=False,
    )
    return ProfileResponse(profile=profile_schema(get_profile(caller)))


@router.put("/{profile_id}/role", response_model=ProfileResponse)
async def change_role(profile_id: str, body: ChangeRoleRequest, caller: str = Depends(principal_id)) -> ProfileResponse:
    command = ChangeRole(actor_id=caller, profile_id=profile_id, new_role=body.role)
    current_domain.process(command, asynchronous=False)
    return ProfileResponse(profile=profile_schema(get_profile(profile_id)))


@router.put("/{profile_id}/approval", response_model=ProfileResponse)
async def review_rider(
    profile_id: str, body: ReviewRiderRequest, caller: str = Depends(principal_id)
) -> ProfileResponse:
    command = ReviewRider(actor_id=caller, profile_id=profile_id, approval_status=body.approval_status)
    current_domain.process(command, asynchronous=False)
    return ProfileResponse(profile=profile_schema(get_profile(profile_id)))
