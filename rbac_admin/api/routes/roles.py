"""
Role management routes.
"""

from fastapi import APIRouter, Depends, Query, status

from rbac_admin.api.dependencies.permissions import require_policy
from rbac_admin.api.dependencies.services import get_role_service
from rbac_admin.schemas.permission import PermissionResponse
from rbac_admin.schemas.role import (
    AssignPermissions,
    RoleCreate,
    RoleDetailResponse,
    RoleListResponse,
    RoleResponse,
    RoleUpdate,
    StatusUpdate,
)
from rbac_admin.services import RoleService

router = APIRouter(dependencies=[Depends(require_policy)])


@router.get("", response_model=RoleListResponse)
async def list_roles(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    status_filter: int | None = Query(None, alias="status", ge=0, le=1),
    role_service: RoleService = Depends(get_role_service),
):
    """List roles."""
    roles, total = await role_service.list_roles(page=page, per_page=per_page, status=status_filter)
    return RoleListResponse(
        roles=[RoleResponse.model_validate(r) for r in roles],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    data: RoleCreate,
    role_service: RoleService = Depends(get_role_service),
):
    """Create a role."""
    role = await role_service.create_role(data)
    return RoleResponse.model_validate(role)


@router.get("/{role_id}", response_model=RoleDetailResponse)
async def get_role(
    role_id: int,
    role_service: RoleService = Depends(get_role_service),
):
    """Get role by ID, with its permissions."""
    role = await role_service.get_role(role_id)
    return RoleDetailResponse.model_validate(role)


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: int,
    data: RoleUpdate,
    role_service: RoleService = Depends(get_role_service),
):
    """Update a role."""
    role = await role_service.update_role(role_id, data)
    return RoleResponse.model_validate(role)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: int,
    role_service: RoleService = Depends(get_role_service),
):
    """Delete a role. Built-in roles are refused."""
    await role_service.delete_role(role_id)


@router.put("/{role_id}/status", response_model=RoleResponse)
async def update_role_status(
    role_id: int,
    data: StatusUpdate,
    role_service: RoleService = Depends(get_role_service),
):
    """Enable or disable a role."""
    role = await role_service.update_status(role_id, data.status)
    return RoleResponse.model_validate(role)


@router.get("/{role_id}/permissions", response_model=list[PermissionResponse])
async def get_role_permissions(
    role_id: int,
    role_service: RoleService = Depends(get_role_service),
):
    """List the permissions assigned to a role."""
    permissions = await role_service.get_role_permissions(role_id)
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.post("/{role_id}/permissions", response_model=RoleDetailResponse)
async def assign_permissions(
    role_id: int,
    data: AssignPermissions,
    role_service: RoleService = Depends(get_role_service),
):
    """Replace the role's permission set."""
    role = await role_service.assign_permissions(role_id, data.permission_ids)
    return RoleDetailResponse.model_validate(role)
