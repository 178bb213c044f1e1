"""
User repository.
"""

from sqlalchemy import Select, func, or_, select

from rbac_admin.models import User

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    def _base_query(self) -> Select:
        return select(User).order_by(User.id)

    async def get_by_username(self, username: str) -> User | None:
        return await self.get_one(username=username)

    async def search(
        self,
        page: int = 1,
        per_page: int = 20,
        search: str | None = None,
        status: int | None = None,
        role_id: int | None = None,
    ) -> tuple[list[User], int]:
        """List users, optionally matching username, email or nickname."""
        stmt = self._base_query()

        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    User.username.ilike(pattern),
                    User.email.ilike(pattern),
                    User.nickname.ilike(pattern),
                )
            )
        if status is not None:
            stmt = stmt.where(User.status == status)
        if role_id is not None:
            stmt = stmt.where(User.role_id == role_id)

        # Count total
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = await self.db.scalar(count_stmt) or 0

        # Paginate
        stmt = stmt.offset((page - 1) * per_page).limit(per_page)
        result = await self.db.execute(stmt)
        users = list(result.scalars().all())

        return users, total
