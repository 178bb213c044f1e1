"""
SQLAlchemy-backed PolicyStore.

Reads tuples from roles / permissions / role_permissions and mirrors the
engine's policy set into policy_rules. Each call opens its own session so
it never shares a transaction with request handling.
"""

from typing import Iterable, Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rbac_admin.models import STATUS_ACTIVE, Permission, PolicyRule, Role, role_permissions

from .errors import PersistenceError, SourceQueryError
from .interfaces import PolicyStore, PolicyTuple


class SqlAlchemyPolicyStore(PolicyStore):
    """PolicyStore over the application database."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def load_active_role_permission_tuples(self) -> Sequence[PolicyTuple]:
        query = (
            select(Role.name, Permission.resource, Permission.action)
            .select_from(role_permissions)
            .join(Role, Role.id == role_permissions.c.role_id)
            .join(Permission, Permission.id == role_permissions.c.permission_id)
            .where(Role.status == STATUS_ACTIVE)
            .where(Permission.status == STATUS_ACTIVE)
        )
        try:
            async with self.session_factory() as db:
                result = await db.execute(query)
                rows = result.all()
        except SQLAlchemyError as e:
            raise SourceQueryError(f"failed to query role permissions: {e}") from e

        return [PolicyTuple(role, resource, action) for role, resource, action in rows]

    async def load_persisted_tuples(self) -> list[PolicyTuple]:
        """Read back the mirrored policy set."""
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(PolicyRule.role, PolicyRule.resource, PolicyRule.action)
                    .order_by(PolicyRule.role, PolicyRule.resource, PolicyRule.action)
                )
                rows = result.all()
        except SQLAlchemyError as e:
            raise SourceQueryError(f"failed to read policy_rules: {e}") from e

        return [PolicyTuple(role, resource, action) for role, resource, action in rows]

    async def persist_policy_snapshot(self, tuples: Iterable[PolicyTuple]) -> None:
        rows = [
            {"role": p.role, "resource": p.resource, "action": p.action}
            for p in sorted(set(tuples), key=lambda p: (str(p.role), str(p.resource), str(p.action)))
        ]
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    await db.execute(delete(PolicyRule))
                    if rows:
                        await db.execute(insert(PolicyRule), rows)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to write policy_rules: {e}") from e
