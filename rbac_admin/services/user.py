"""
User service.

Users do not contribute policy tuples, so nothing here touches the policy
engine. Changing a user's role takes effect with the next token issued for
that user.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_admin.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from rbac_admin.models import Role, User
from rbac_admin.repositories import RoleRepository, UserRepository
from rbac_admin.schemas.user import ProfileUpdate, UserCreate, UserUpdate

logger = structlog.get_logger(__name__)


class UserService:
    """User management service."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)
        self.roles = RoleRepository(db)

    async def list_users(
        self,
        page: int = 1,
        per_page: int = 20,
        search: str | None = None,
        status: int | None = None,
    ) -> tuple[list[User], int]:
        """List users with pagination."""
        return await self.users.search(page=page, per_page=per_page, search=search, status=status)

    async def get_user(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def get_by_username(self, username: str) -> User:
        user = await self.users.get_by_username(username)
        if not user:
            raise NotFoundError(f"User '{username}' not found")
        return user

    async def create_user(self, data: UserCreate) -> User:
        if await self.users.exists(username=data.username):
            raise ConflictError(f"Username '{data.username}' already exists")
        if await self.users.exists(email=data.email):
            raise ConflictError(f"Email '{data.email}' already exists")

        role = await self._resolve_role(data.role)
        user = await self.users.create(
            **data.model_dump(exclude={"role"}),
            role=role,
        )
        await self.db.commit()
        logger.info("user.created", user_id=user.id, username=user.username, role=role.name)
        return user

    async def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = await self.get_user(user_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        new_email = update_data.get("email")
        if new_email and new_email != user.email:
            if await self.users.exists(email=new_email, exclude_id=user.id):
                raise ConflictError(f"Email '{new_email}' already exists")

        role_name = update_data.pop("role", None)
        if role_name is not None:
            update_data["role_id"] = (await self._resolve_role(role_name)).id

        user = await self.users.update(user, **update_data)
        if "role_id" in update_data:
            await self.db.refresh(user, ["role"])
        await self.db.commit()
        logger.info("user.updated", user_id=user.id, fields=sorted(update_data))
        return user

    async def update_profile(self, username: str, data: ProfileUpdate) -> User:
        user = await self.get_by_username(username)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        user = await self.users.update(user, **update_data)
        await self.db.commit()
        logger.info("user.profile_updated", user_id=user.id, fields=sorted(update_data))
        return user

    async def delete_user(self, user_id: int) -> None:
        user = await self.get_user(user_id)
        await self.users.delete(user)
        await self.db.commit()
        logger.info("user.deleted", user_id=user_id, username=user.username)

    async def update_status(self, user_id: int, status: int) -> User:
        user = await self.get_user(user_id)
        if user.status == status:
            return user

        user = await self.users.update(user, status=status)
        await self.db.commit()
        logger.info("user.status_changed", user_id=user.id, status=status)
        return user

    async def _resolve_role(self, name: str) -> Role:
        role = await self.roles.get_by_name(name)
        if not role:
            raise ValidationFailedError(f"Role '{name}' does not exist")
        return role
