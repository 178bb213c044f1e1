"""
Permission management routes.
"""

from fastapi import APIRouter, Depends, Query, status

from rbac_admin.api.dependencies.permissions import require_policy
from rbac_admin.api.dependencies.services import get_permission_service
from rbac_admin.schemas.permission import (
    PermissionCreate,
    PermissionListResponse,
    PermissionResponse,
    PermissionUpdate,
)
from rbac_admin.schemas.role import StatusUpdate
from rbac_admin.services import PermissionService

router = APIRouter(dependencies=[Depends(require_policy)])


@router.get("", response_model=PermissionListResponse)
async def list_permissions(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    status_filter: int | None = Query(None, alias="status", ge=0, le=1),
    type_filter: str | None = Query(None, alias="type"),
    permission_service: PermissionService = Depends(get_permission_service),
):
    """List permissions."""
    permissions, total = await permission_service.list_permissions(
        page=page,
        per_page=per_page,
        status=status_filter,
        type=type_filter,
    )
    return PermissionListResponse(
        permissions=[PermissionResponse.model_validate(p) for p in permissions],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.post("", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
async def create_permission(
    data: PermissionCreate,
    permission_service: PermissionService = Depends(get_permission_service),
):
    """Create a permission."""
    permission = await permission_service.create_permission(data)
    return PermissionResponse.model_validate(permission)


@router.get("/{permission_id}", response_model=PermissionResponse)
async def get_permission(
    permission_id: int,
    permission_service: PermissionService = Depends(get_permission_service),
):
    """Get permission by ID."""
    permission = await permission_service.get_permission(permission_id)
    return PermissionResponse.model_validate(permission)


@router.put("/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    permission_id: int,
    data: PermissionUpdate,
    permission_service: PermissionService = Depends(get_permission_service),
):
    """Update a permission."""
    permission = await permission_service.update_permission(permission_id, data)
    return PermissionResponse.model_validate(permission)


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_permission(
    permission_id: int,
    permission_service: PermissionService = Depends(get_permission_service),
):
    """Delete a permission. Built-in permissions are refused."""
    await permission_service.delete_permission(permission_id)


@router.put("/{permission_id}/status", response_model=PermissionResponse)
async def update_permission_status(
    permission_id: int,
    data: StatusUpdate,
    permission_service: PermissionService = Depends(get_permission_service),
):
    """Enable or disable a permission."""
    permission = await permission_service.update_status(permission_id, data.status)
    return PermissionResponse.model_validate(permission)
