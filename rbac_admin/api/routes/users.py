"""
User management routes.
"""

from fastapi import APIRouter, Depends, Query, status

from rbac_admin.api.dependencies.permissions import require_policy
from rbac_admin.api.dependencies.services import get_user_service
from rbac_admin.schemas.role import StatusUpdate
from rbac_admin.schemas.user import UserCreate, UserListResponse, UserResponse, UserUpdate
from rbac_admin.services import UserService

router = APIRouter(dependencies=[Depends(require_policy)])


@router.get("", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    search: str | None = Query(None, max_length=100),
    status_filter: int | None = Query(None, alias="status", ge=0, le=1),
    user_service: UserService = Depends(get_user_service),
):
    """List users (admin only)."""
    users, total = await user_service.list_users(
        page=page,
        per_page=per_page,
        search=search,
        status=status_filter,
    )
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    user_service: UserService = Depends(get_user_service),
):
    """Create a user bound to an existing role."""
    user = await user_service.create_user(data)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
):
    """Get user by ID."""
    user = await user_service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    user_service: UserService = Depends(get_user_service),
):
    """Update a user, including their role."""
    user = await user_service.update_user(user_id, data)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
):
    await user_service.delete_user(user_id)


@router.put("/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: int,
    data: StatusUpdate,
    user_service: UserService = Depends(get_user_service),
):
    """Enable or disable a user."""
    user = await user_service.update_status(user_id, data.status)
    return UserResponse.model_validate(user)
