"""
Policy synchronizer.

Rebuilds the enforcer's policy set from the role/permission associations:

    1. load every (role, resource, action) for active role + active permission
    2. swap the enforcer to the new set in one step
    3. mirror the new set to the policy store

Full synchronizations are serialized. A failed load leaves the previous
set live; a failed mirror write is reported but the new set stays live.
Mirror writes never let an older snapshot overwrite a newer one.
"""

import asyncio

import structlog

from .enforcer import Enforcer, PolicySnapshot
from .errors import PersistenceError, PolicyError, SourceQueryError
from .interfaces import MutationResult, PolicyStore, SyncResult

logger = structlog.get_logger(__name__)


class PolicySynchronizer:
    """Keeps an Enforcer in step with the association tables."""

    def __init__(self, enforcer: Enforcer, store: PolicyStore):
        self.enforcer = enforcer
        self.store = store
        self._lock = asyncio.Lock()
        self._persist_lock = asyncio.Lock()

    async def synchronize(self) -> SyncResult:
        """
        Run a full synchronization.

        Raises:
            SourceQueryError: If association data could not be read. The
                enforcer is left untouched.
        """
        async with self._lock:
            try:
                tuples = await self.store.load_active_role_permission_tuples()
            except SourceQueryError:
                logger.error("policy.sync_load_failed", exc_info=True)
                raise
            except Exception as e:
                logger.error("policy.sync_load_failed", exc_info=True)
                raise SourceQueryError(f"failed to load role permissions: {e}") from e

            snapshot = self.enforcer.load(tuples)
            result = SyncResult(count=len(snapshot), version=snapshot.version)

        # Mirror outside the lock; readers already see the new set.
        await self.mirror(snapshot, result)

        logger.info(
            "policy.synchronized",
            count=result.count,
            version=result.version,
            persisted=result.persisted,
        )
        return result

    async def mirror(self, snapshot: PolicySnapshot, result: SyncResult | MutationResult) -> None:
        """
        Write a snapshot to the policy store and record the outcome on result.

        Mirror writes are serialized. A snapshot that is older than the live
        one by the time its turn comes is skipped; the newer writer mirrors
        its own set. Failures are recorded, never raised.
        """
        async with self._persist_lock:
            if snapshot.version < self.enforcer.version:
                logger.debug(
                    "policy.persist_superseded",
                    version=snapshot.version,
                    live_version=self.enforcer.version,
                )
                return

            try:
                await self.store.persist_policy_snapshot(snapshot.sorted())
                result.persisted = True
            except Exception as e:
                error = e if isinstance(e, PersistenceError) else PersistenceError(str(e))
                result.persistence_error = error
                logger.warning(
                    "policy.persist_failed",
                    version=snapshot.version,
                    error=str(e),
                    exc_info=True,
                )

    async def run_periodic(self, interval_seconds: float) -> None:
        """
        Reconcile forever at a fixed interval.

        Intended to run as a background task; cancel it to stop.
        """
        logger.info("policy.reconcile_started", interval_seconds=interval_seconds)
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await self.synchronize()
            except PolicyError as e:
                logger.error("policy.reconcile_failed", error=str(e))
