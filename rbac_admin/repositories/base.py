"""
Base repository with common CRUD operations.
"""

from typing import TypeVar, Generic, Type, Sequence
from sqlalchemy import Select, select, func
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_admin.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Base repository providing common CRUD operations.

    Usage:
        class RoleRepository(BaseRepository[Role]):
            model = Role

        repo = RoleRepository(db)
        role = await repo.get_by_id(role_id)
        roles, total = await repo.list(page=1, per_page=20)
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self) -> Select:
        """Base query - override to add default filters or ordering."""
        return select(self.model)

    async def get_by_id(self, id: int) -> ModelT | None:
        """Get entity by ID."""
        stmt = self._base_query().where(self.model.id == id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, ids: Sequence[int]) -> list[ModelT]:
        """Get multiple entities by IDs."""
        if not ids:
            return []
        stmt = self._base_query().where(self.model.id.in_(ids))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_one(self, **filters) -> ModelT | None:
        """Get single entity by filters."""
        stmt = self._base_query()
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, exclude_id: int | None = None, **filters) -> bool:
        """Check if entity exists, optionally ignoring one ID."""
        stmt = select(func.count()).select_from(self.model)
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        count = await self.db.scalar(stmt)
        return (count or 0) > 0

    async def list(
        self,
        page: int = 1,
        per_page: int = 20,
        **filters,
    ) -> tuple[list[ModelT], int]:
        """
        List entities with pagination and optional filters.

        Args:
            page: Page number (1-indexed)
            per_page: Items per page
            **filters: Field=value filters (None values are ignored)
        """
        stmt = self._base_query()

        for field, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, field) == value)

        # Count total
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = await self.db.scalar(count_stmt) or 0

        # Paginate
        stmt = stmt.offset((page - 1) * per_page).limit(per_page)
        result = await self.db.execute(stmt)
        items = list(result.scalars().all())

        return items, total

    async def create(self, **data) -> ModelT:
        """Create new entity."""
        entity = self.model(**data)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity: ModelT, **data) -> ModelT:
        """Apply field updates to a loaded entity."""
        for field, value in data.items():
            if hasattr(entity, field):
                setattr(entity, field, value)

        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def delete(self, entity: ModelT) -> None:
        """Delete entity (hard delete)."""
        await self.db.delete(entity)
        await self.db.flush()
