"""Self-service profile endpoints."""

from fastapi import APIRouter, Depends
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.api.dependencies import require_user
from storefront.api.schemas import (
    ChangePasswordRequest,
    MessageResponse,
    UpdateProfileRequest,
    UserEnvelope,
    UserResponse,
    UserUpdatedResponse,
)
from storefront.auth.principal import Authenticated
from storefront.identity.credentials import hash_password, verify_password
from storefront.identity.profile import ChangePassword, UpdateProfile
from storefront.identity.user import User

users_router = APIRouter(prefix="/users", tags=["users"])


@users_router.get("/profile", response_model=UserEnvelope)
async def get_profile(principal: Authenticated = Depends(require_user)) -> UserEnvelope:
    return UserEnvelope(user=UserResponse.from_user(principal.user))


@users_router.put("/profile", response_model=UserUpdatedResponse)
async def update_profile(
    body: UpdateProfileRequest,
    principal: Authenticated = Depends(require_user),
) -> UserUpdatedResponse:
    command = UpdateProfile(
        user_id=principal.user_id,
        name=body.name,
        phone=body.phone,
        address=body.address,
    )
    current_domain.process(command, asynchronous=False)
    user = current_domain.repository_for(User).get(principal.user_id)
    return UserUpdatedResponse(message="Profile updated successfully", user=UserResponse.from_user(user))


@users_router.put("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    principal: Authenticated = Depends(require_user),
) -> MessageResponse:
    if not verify_password(body.current_password, principal.user.password_hash):
        raise ValidationError({"current_password": ["Current password is incorrect"]})

    command = ChangePassword(
        user_id=principal.user_id,
        new_password_hash=hash_password(body.new_password),
    )
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Password updated successfully")
