"""
Current-user routes.

The caller is identified by the token subject, which is a username.
"""

from fastapi import APIRouter, Depends

from rbac_admin.api.dependencies.auth import Principal
from rbac_admin.api.dependencies.permissions import require_policy
from rbac_admin.api.dependencies.services import get_user_service
from rbac_admin.schemas.user import ProfileUpdate, UserResponse
from rbac_admin.services import UserService

router = APIRouter()


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    principal: Principal = Depends(require_policy),
    user_service: UserService = Depends(get_user_service),
):
    """Get the caller's own account."""
    user = await user_service.get_by_username(principal.subject)
    return UserResponse.model_validate(user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    principal: Principal = Depends(require_policy),
    user_service: UserService = Depends(get_user_service),
):
    """Update the caller's own nickname, avatar or phone."""
    user = await user_service.update_profile(principal.subject, data)
    return UserResponse.model_validate(user)
