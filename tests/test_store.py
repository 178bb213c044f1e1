"""
Tests for the SQLAlchemy policy store.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_admin.core.rbac import PolicyTuple
from rbac_admin.core.rbac.store import SqlAlchemyPolicyStore
from rbac_admin.models import STATUS_INACTIVE, Permission, Role


@pytest.mark.asyncio
async def test_load_returns_active_associations(seeded: AsyncSession, session_factory):
    store = SqlAlchemyPolicyStore(session_factory)

    tuples = await store.load_active_role_permission_tuples()

    assert PolicyTuple("admin", "/api/*", "*") in tuples
    assert PolicyTuple("user", "/api/auth/profile", "PUT") in tuples
    assert PolicyTuple("guest", "/api/auth/profile", "GET") in tuples
    assert PolicyTuple("guest", "/api/auth/profile", "PUT") not in tuples
    assert len(tuples) == 1 + 4 + 1


@pytest.mark.asyncio
async def test_load_skips_inactive_role_and_permission(db: AsyncSession, session_factory):
    active_perm = Permission(name="p.on", display_name="On", resource="/api/on", action="GET")
    inactive_perm = Permission(
        name="p.off", display_name="Off", resource="/api/off", action="GET", status=STATUS_INACTIVE
    )
    active_role = Role(name="editor", display_name="Editor", permissions=[active_perm, inactive_perm])
    inactive_role = Role(
        name="ghost", display_name="Ghost", status=STATUS_INACTIVE, permissions=[active_perm]
    )
    db.add_all([active_role, inactive_role])
    await db.commit()

    tuples = await SqlAlchemyPolicyStore(session_factory).load_active_role_permission_tuples()

    assert tuples == [PolicyTuple("editor", "/api/on", "GET")]


@pytest.mark.asyncio
async def test_persist_replaces_mirror(session_factory):
    store = SqlAlchemyPolicyStore(session_factory)

    await store.persist_policy_snapshot([
        PolicyTuple("admin", "/api/*", "*"),
        PolicyTuple("user", "/api/users", "GET"),
    ])
    await store.persist_policy_snapshot([PolicyTuple("user", "/api/users", "GET")])

    assert await store.load_persisted_tuples() == [PolicyTuple("user", "/api/users", "GET")]


@pytest.mark.asyncio
async def test_persist_empty_set_clears_mirror(session_factory):
    store = SqlAlchemyPolicyStore(session_factory)
    await store.persist_policy_snapshot([PolicyTuple("admin", "/api/*", "*")])

    await store.persist_policy_snapshot([])

    assert await store.load_persisted_tuples() == []
