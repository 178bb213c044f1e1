"""
Synchronization against the real role/permission tables.
"""

import asyncio
import threading

import pytest
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_admin.core.rbac import Enforcer, PolicySynchronizer, PolicyTuple
from rbac_admin.core.rbac.store import SqlAlchemyPolicyStore
from rbac_admin.models import STATUS_ACTIVE, STATUS_INACTIVE, Permission, Role


@pytest.mark.asyncio
async def test_admin_user_guest_after_synchronize(db: AsyncSession, session_factory):
    user_list = Permission(name="user.list", display_name="List users", resource="/api/users", action="GET")
    system_all = Permission(name="system.all", display_name="Full access", resource="/api/*", action="*")
    db.add_all([
        Role(name="admin", display_name="Administrator", permissions=[system_all]),
        Role(name="user", display_name="User", permissions=[user_list]),
    ])
    await db.commit()

    enforcer = Enforcer()
    store = SqlAlchemyPolicyStore(session_factory)
    result = await PolicySynchronizer(enforcer, store).synchronize()

    assert result.count == 2
    assert result.persisted is True
    assert enforcer.enforce("admin", "/api/roles", "DELETE") is True
    assert enforcer.enforce("user", "/api/users", "GET") is True
    assert enforcer.enforce("user", "/api/users", "DELETE") is False
    assert enforcer.enforce("guest", "/api/users", "GET") is False
    assert await store.load_persisted_tuples() == [
        PolicyTuple("admin", "/api/*", "*"),
        PolicyTuple("user", "/api/users", "GET"),
    ]


GENERATION_A = {"a.one", "a.two"}
GENERATION_B = {"b.one", "b.two"}


async def activate(session_factory, names: set[str]) -> None:
    """Make exactly the named permissions active, in one transaction."""
    async with session_factory() as session:
        await session.execute(
            update(Permission).where(Permission.name.in_(names)).values(status=STATUS_ACTIVE)
        )
        await session.execute(
            update(Permission).where(Permission.name.not_in(names)).values(status=STATUS_INACTIVE)
        )
        await session.commit()


@pytest.mark.asyncio
async def test_readers_see_whole_generations_during_synchronize(db: AsyncSession, session_factory):
    permissions = [
        Permission(name="a.one", display_name="A1", resource="/a", action="GET"),
        Permission(name="a.two", display_name="A2", resource="/a2", action="GET"),
        Permission(name="b.one", display_name="B1", resource="/b", action="GET"),
        Permission(name="b.two", display_name="B2", resource="/b2", action="GET"),
    ]
    db.add(Role(name="r", display_name="R", permissions=permissions))
    await db.commit()

    enforcer = Enforcer()
    store = SqlAlchemyPolicyStore(session_factory)
    synchronizer = PolicySynchronizer(enforcer, store)
    await activate(session_factory, GENERATION_A)
    await synchronizer.synchronize()

    stop = threading.Event()
    failures: list[str] = []
    checks = 0

    def reader():
        nonlocal checks
        while not stop.is_set():
            snapshot = enforcer.snapshot()
            a = snapshot.enforce("r", "/a", "GET") and snapshot.enforce("r", "/a2", "GET")
            b = snapshot.enforce("r", "/b", "GET") and snapshot.enforce("r", "/b2", "GET")
            if a == b:
                failures.append(f"mixed snapshot at version {snapshot.version}")
            checks += 1

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for t in readers:
        t.start()
    try:
        for i in range(30):
            await activate(session_factory, GENERATION_B if i % 2 == 0 else GENERATION_A)
            await synchronizer.synchronize()
            await asyncio.sleep(0)
    finally:
        stop.set()
        for t in readers:
            t.join()

    assert failures == []
    assert checks > 0
    # 30 swaps starting from A end on A
    assert enforcer.enforce("r", "/a", "GET") is True
    assert enforcer.enforce("r", "/b", "GET") is False
    assert await store.load_persisted_tuples() == enforcer.list_policies()
