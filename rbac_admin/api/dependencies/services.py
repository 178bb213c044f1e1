"""
Service dependencies.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_admin.core.rbac import PolicyAdmin
from rbac_admin.services import PermissionService, RoleService, UserService
from .database import get_db


def get_policy_admin(request: Request) -> PolicyAdmin:
    """Get the application's PolicyAdmin (wired in the lifespan)."""
    return request.app.state.policy_admin


async def get_role_service(
    db: AsyncSession = Depends(get_db),
    policy_admin: PolicyAdmin = Depends(get_policy_admin),
) -> RoleService:
    """Get role service instance."""
    return RoleService(db, policy_admin)


async def get_permission_service(
    db: AsyncSession = Depends(get_db),
    policy_admin: PolicyAdmin = Depends(get_policy_admin),
) -> PermissionService:
    """Get permission service instance."""
    return PermissionService(db, policy_admin)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """Get user service instance."""
    return UserService(db)
