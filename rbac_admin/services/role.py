"""
Role service.
"""

import structlog

from rbac_admin.core.config import settings
from rbac_admin.core.exceptions import ConflictError, NotFoundError, ReservedResourceError
from rbac_admin.models import Permission, Role
from rbac_admin.repositories import PermissionRepository, RoleRepository, UserRepository
from rbac_admin.schemas.role import RoleCreate, RoleUpdate

from .base import PolicyAwareService

logger = structlog.get_logger(__name__)


class RoleService(PolicyAwareService):
    """Role management service."""

    def __init__(self, db, policy_admin):
        super().__init__(db, policy_admin)
        self.roles = RoleRepository(db)
        self.permissions = PermissionRepository(db)
        self.users = UserRepository(db)

    async def list_roles(
        self,
        page: int = 1,
        per_page: int = 20,
        status: int | None = None,
    ) -> tuple[list[Role], int]:
        """List roles with pagination."""
        return await self.roles.list(page=page, per_page=per_page, status=status)

    async def get_role(self, role_id: int) -> Role:
        role = await self.roles.get_by_id(role_id)
        if not role:
            raise NotFoundError(f"Role {role_id} not found")
        return role

    async def create_role(self, data: RoleCreate) -> Role:
        if await self.roles.exists(name=data.name):
            raise ConflictError(f"Role '{data.name}' already exists")

        role = await self.roles.create(**data.model_dump())
        await self.db.commit()
        logger.info("role.created", role_id=role.id, name=role.name)
        return role

    async def update_role(self, role_id: int, data: RoleUpdate) -> Role:
        role = await self.get_role(role_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        new_name = update_data.get("name")
        renamed = new_name is not None and new_name != role.name
        if renamed and await self.roles.exists(name=new_name, exclude_id=role.id):
            raise ConflictError(f"Role '{new_name}' already exists")

        role = await self.roles.update(role, **update_data)
        logger.info("role.updated", role_id=role.id, fields=sorted(update_data))

        if renamed and role.permissions:
            await self._commit_and_synchronize("role.renamed")
        else:
            await self.db.commit()
        return role

    async def delete_role(self, role_id: int) -> None:
        role = await self.get_role(role_id)
        if role.name in settings.rbac.reserved_roles:
            raise ReservedResourceError(f"Role '{role.name}' is built in and cannot be deleted")
        if await self.users.exists(role_id=role.id):
            raise ConflictError(f"Role '{role.name}' is still assigned to users")

        had_permissions = bool(role.permissions)
        await self.roles.delete(role)
        logger.info("role.deleted", role_id=role_id, name=role.name)

        if had_permissions:
            await self._commit_and_synchronize("role.deleted")
        else:
            await self.db.commit()

    async def update_status(self, role_id: int, status: int) -> Role:
        role = await self.get_role(role_id)
        if role.status == status:
            return role

        role = await self.roles.update(role, status=status)
        logger.info("role.status_changed", role_id=role.id, status=status)
        await self._commit_and_synchronize("role.status_changed")
        return role

    async def get_role_permissions(self, role_id: int) -> list[Permission]:
        role = await self.get_role(role_id)
        return list(role.permissions)

    async def assign_permissions(self, role_id: int, permission_ids: list[int]) -> Role:
        """
        Replace the role's permission set.

        The role's live grants are swapped in one step before the full
        synchronization reconciles everything else.
        """
        role = await self.get_role(role_id)

        wanted = list(dict.fromkeys(permission_ids))
        permissions = await self.permissions.get_by_ids(wanted)
        missing = sorted(set(wanted) - {p.id for p in permissions})
        if missing:
            raise NotFoundError(f"Permissions not found: {missing}")

        role = await self.roles.set_permissions(role, permissions)
        await self.db.commit()
        logger.info("role.permissions_assigned", role_id=role.id, permission_ids=wanted)

        if self.policy_admin.enforcer.initialized:
            grants = (
                [(p.resource, p.action) for p in permissions if p.is_active]
                if role.is_active
                else []
            )
            await self.policy_admin.replace_role_policies(role.name, grants)

        await self._commit_and_synchronize("role.permissions_assigned")
        return role
