"""
Tests for full policy synchronization.
"""

import asyncio

import pytest

from rbac_admin.core.rbac import (
    Enforcer,
    NotInitializedError,
    PersistenceError,
    PolicyAdmin,
    PolicySynchronizer,
    PolicyTuple,
    SourceQueryError,
    SyncResult,
)

from conftest import FailingPersistStore, FailingSourceStore, InMemoryPolicyStore


ADMIN_ALL = PolicyTuple("admin", "/api/*", "*")
USER_LIST = PolicyTuple("user", "/api/users", "GET")


@pytest.mark.asyncio
async def test_synchronize_loads_and_persists(enforcer: Enforcer):
    store = InMemoryPolicyStore([ADMIN_ALL, USER_LIST, USER_LIST])
    synchronizer = PolicySynchronizer(enforcer, store)

    result = await synchronizer.synchronize()

    assert result.count == 2
    assert result.persisted is True
    assert result.persistence_error is None
    assert enforcer.initialized
    assert store.persisted == sorted([ADMIN_ALL, USER_LIST])


@pytest.mark.asyncio
async def test_synchronize_replaces_previous_set(enforcer: Enforcer):
    store = InMemoryPolicyStore([ADMIN_ALL])
    synchronizer = PolicySynchronizer(enforcer, store)
    await synchronizer.synchronize()

    store.source = [USER_LIST]
    await synchronizer.synchronize()

    assert enforcer.enforce("admin", "/api/roles", "GET") is False
    assert enforcer.enforce("user", "/api/users", "GET") is True


@pytest.mark.asyncio
async def test_synchronize_empty_source_initializes(enforcer: Enforcer):
    synchronizer = PolicySynchronizer(enforcer, InMemoryPolicyStore())

    result = await synchronizer.synchronize()

    assert result.count == 0
    assert enforcer.initialized
    assert enforcer.enforce("admin", "/api/roles", "GET") is False


@pytest.mark.asyncio
async def test_source_failure_keeps_previous_set(enforcer: Enforcer):
    enforcer.load([ADMIN_ALL])
    version = enforcer.version
    store = FailingSourceStore()
    synchronizer = PolicySynchronizer(enforcer, store)

    with pytest.raises(SourceQueryError):
        await synchronizer.synchronize()

    assert enforcer.version == version
    assert enforcer.enforce("admin", "/api/roles", "GET") is True
    assert store.persist_calls == 0


@pytest.mark.asyncio
async def test_source_failure_before_first_load_leaves_uninitialized(enforcer: Enforcer):
    synchronizer = PolicySynchronizer(enforcer, FailingSourceStore())

    with pytest.raises(SourceQueryError):
        await synchronizer.synchronize()

    with pytest.raises(NotInitializedError):
        enforcer.enforce("admin", "/api/roles", "GET")


@pytest.mark.asyncio
async def test_unexpected_source_error_is_wrapped(enforcer: Enforcer):
    class BrokenStore(InMemoryPolicyStore):
        async def load_active_role_permission_tuples(self):
            raise RuntimeError("connection reset")

    synchronizer = PolicySynchronizer(enforcer, BrokenStore())

    with pytest.raises(SourceQueryError):
        await synchronizer.synchronize()


@pytest.mark.asyncio
async def test_persistence_failure_is_reported_not_raised(enforcer: Enforcer):
    store = FailingPersistStore([ADMIN_ALL])
    synchronizer = PolicySynchronizer(enforcer, store)

    result = await synchronizer.synchronize()

    assert result.persisted is False
    assert isinstance(result.persistence_error, PersistenceError)
    # The new set is live anyway
    assert enforcer.enforce("admin", "/api/roles", "GET") is True


@pytest.mark.asyncio
async def test_concurrent_synchronizations_are_serialized(enforcer: Enforcer):
    in_flight = 0
    max_in_flight = 0

    class SlowStore(InMemoryPolicyStore):
        async def load_active_role_permission_tuples(self):
            nonlocal in_flight, max_in_flight
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return list(self.source)

    synchronizer = PolicySynchronizer(enforcer, SlowStore([ADMIN_ALL]))

    results = await asyncio.gather(*(synchronizer.synchronize() for _ in range(5)))

    assert max_in_flight == 1
    assert sorted(r.version for r in results) == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_run_periodic_keeps_going_after_failures(enforcer: Enforcer):
    class FlakyStore(InMemoryPolicyStore):
        async def load_active_role_permission_tuples(self):
            self.load_calls += 1
            if self.load_calls == 1:
                raise SourceQueryError("transient")
            return list(self.source)

    store = FlakyStore([USER_LIST])
    synchronizer = PolicySynchronizer(enforcer, store)

    task = asyncio.create_task(synchronizer.run_periodic(0.01))
    for _ in range(100):
        if enforcer.initialized:
            break
        await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert store.load_calls >= 2
    assert enforcer.enforce("user", "/api/users", "GET") is True


@pytest.mark.asyncio
async def test_mirror_skips_superseded_snapshot(enforcer: Enforcer):
    store = InMemoryPolicyStore()
    synchronizer = PolicySynchronizer(enforcer, store)
    stale = enforcer.load([ADMIN_ALL])
    enforcer.load([ADMIN_ALL, USER_LIST])

    result = SyncResult(count=len(stale), version=stale.version)
    await synchronizer.mirror(stale, result)

    assert result.persisted is False
    assert result.persistence_error is None
    assert store.persist_calls == 0


@pytest.mark.asyncio
async def test_overlapping_write_throughs_leave_newest_mirror(enforcer: Enforcer):
    release = asyncio.Event()

    class GatedStore(InMemoryPolicyStore):
        async def persist_policy_snapshot(self, tuples):
            tuples = list(tuples)
            if self.persist_calls == 0:
                self.persist_calls += 1
                await release.wait()
                self.persisted = sorted(set(tuples))
                return
            await super().persist_policy_snapshot(tuples)

    store = GatedStore()
    enforcer.load([])
    admin = PolicyAdmin(enforcer, store)

    first = asyncio.create_task(admin.add_policy("admin", "/api/*", "*"))
    await asyncio.sleep(0)
    second = asyncio.create_task(admin.add_policy("user", "/api/users", "GET"))
    await asyncio.sleep(0)
    release.set()
    first_result, second_result = await asyncio.gather(first, second)

    assert first_result.persisted is True
    assert second_result.persisted is True
    assert store.persisted == sorted([ADMIN_ALL, USER_LIST])
