"""
Role repository.
"""

from sqlalchemy import Select, select

from rbac_admin.models import Permission, Role

from .base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    model = Role

    def _base_query(self) -> Select:
        return select(Role).order_by(Role.id)

    async def get_by_name(self, name: str) -> Role | None:
        return await self.get_one(name=name)

    async def set_permissions(self, role: Role, permissions: list[Permission]) -> Role:
        """Replace the role's full permission set."""
        role.permissions = permissions
        await self.db.flush()
        await self.db.refresh(role)
        return role
