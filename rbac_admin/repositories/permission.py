"""
Permission repository.
"""

from sqlalchemy import Select, select, update

from rbac_admin.models import Permission

from .base import BaseRepository


class PermissionRepository(BaseRepository[Permission]):
    model = Permission

    def _base_query(self) -> Select:
        return select(Permission).order_by(Permission.sort, Permission.id)

    async def detach_children(self, parent_id: int) -> int:
        """Clear parent_id on the children of a permission about to be deleted."""
        result = await self.db.execute(
            update(Permission)
            .where(Permission.parent_id == parent_id)
            .values(parent_id=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
