"""
Permission service.
"""

import structlog

from rbac_admin.core.config import settings
from rbac_admin.core.exceptions import (
    ConflictError,
    NotFoundError,
    ReservedResourceError,
    ValidationFailedError,
)
from rbac_admin.models import Permission
from rbac_admin.repositories import PermissionRepository
from rbac_admin.schemas.permission import PermissionCreate, PermissionUpdate

from .base import PolicyAwareService

logger = structlog.get_logger(__name__)

# Fields that change the tuples a permission contributes.
POLICY_FIELDS = {"resource", "action"}


class PermissionService(PolicyAwareService):
    """Permission management service."""

    def __init__(self, db, policy_admin):
        super().__init__(db, policy_admin)
        self.permissions = PermissionRepository(db)

    async def list_permissions(
        self,
        page: int = 1,
        per_page: int = 20,
        status: int | None = None,
        type: str | None = None,
    ) -> tuple[list[Permission], int]:
        """List permissions with pagination."""
        return await self.permissions.list(page=page, per_page=per_page, status=status, type=type)

    async def get_permission(self, permission_id: int) -> Permission:
        permission = await self.permissions.get_by_id(permission_id)
        if not permission:
            raise NotFoundError(f"Permission {permission_id} not found")
        return permission

    async def create_permission(self, data: PermissionCreate) -> Permission:
        if await self.permissions.exists(name=data.name):
            raise ConflictError(f"Permission '{data.name}' already exists")
        if data.parent_id is not None:
            await self._check_parent(data.parent_id)

        permission = await self.permissions.create(**data.model_dump())
        await self.db.commit()
        logger.info("permission.created", permission_id=permission.id, name=permission.name)
        return permission

    async def update_permission(self, permission_id: int, data: PermissionUpdate) -> Permission:
        permission = await self.get_permission(permission_id)
        update_data = data.model_dump(exclude_unset=True)
        # parent_id may be cleared explicitly; other fields ignore nulls
        update_data = {k: v for k, v in update_data.items() if v is not None or k == "parent_id"}

        new_name = update_data.get("name")
        if new_name and new_name != permission.name:
            if await self.permissions.exists(name=new_name, exclude_id=permission.id):
                raise ConflictError(f"Permission '{new_name}' already exists")

        parent_id = update_data.get("parent_id")
        if parent_id is not None:
            if parent_id == permission.id:
                raise ValidationFailedError("A permission cannot be its own parent")
            await self._check_parent(parent_id)

        changes_policy = any(
            field in update_data and update_data[field] != getattr(permission, field)
            for field in POLICY_FIELDS
        )

        permission = await self.permissions.update(permission, **update_data)
        logger.info("permission.updated", permission_id=permission.id, fields=sorted(update_data))

        if changes_policy and permission.roles:
            await self._commit_and_synchronize("permission.updated")
        else:
            await self.db.commit()
        return permission

    async def delete_permission(self, permission_id: int) -> None:
        permission = await self.get_permission(permission_id)
        if permission.name in settings.rbac.reserved_permissions:
            raise ReservedResourceError(
                f"Permission '{permission.name}' is built in and cannot be deleted"
            )

        had_roles = bool(permission.roles)
        await self.permissions.detach_children(permission.id)
        await self.permissions.delete(permission)
        logger.info("permission.deleted", permission_id=permission_id, name=permission.name)

        if had_roles:
            await self._commit_and_synchronize("permission.deleted")
        else:
            await self.db.commit()

    async def update_status(self, permission_id: int, status: int) -> Permission:
        permission = await self.get_permission(permission_id)
        if permission.status == status:
            return permission

        permission = await self.permissions.update(permission, status=status)
        logger.info("permission.status_changed", permission_id=permission.id, status=status)

        if permission.roles:
            await self._commit_and_synchronize("permission.status_changed")
        else:
            await self.db.commit()
        return permission

    async def _check_parent(self, parent_id: int) -> None:
        if not await self.permissions.get_by_id(parent_id):
            raise ValidationFailedError(f"Parent permission {parent_id} not found")
