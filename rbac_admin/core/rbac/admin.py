"""
Policy mutation API.

Direct edits to the live policy set, with write-through to the policy
store. Edits are idempotent: adding a present tuple or removing an absent
one is a no-op that touches neither the enforcer nor the store.

A failed write-through does not roll back the in-memory change. The
MutationResult reports it and the next full synchronization repairs the
mirror.

Usage:
    admin = PolicyAdmin(enforcer, store, synchronizer)

    result = await admin.add_policy("editor", "/api/posts/*", "PUT")
    if result.persistence_error:
        ...
"""

from typing import Iterable

import structlog

from .enforcer import Enforcer
from .errors import InvalidPolicyError
from .interfaces import MutationResult, PolicyStore, PolicyTuple, SyncResult
from .matcher import find_malformation
from .synchronizer import PolicySynchronizer

logger = structlog.get_logger(__name__)


class PolicyAdmin:
    """Administrative operations on the live policy set."""

    def __init__(
        self,
        enforcer: Enforcer,
        store: PolicyStore,
        synchronizer: PolicySynchronizer | None = None,
    ):
        self.enforcer = enforcer
        self.store = store
        self.synchronizer = synchronizer or PolicySynchronizer(enforcer, store)

    # ============================================================
    # SINGLE TUPLE EDITS
    # ============================================================

    async def add_policy(self, role: str, resource: str, action: str) -> MutationResult:
        """
        Grant (role, resource, action).

        Raises:
            InvalidPolicyError: If the tuple is malformed
            NotInitializedError: If the enforcer has not been loaded
        """
        policy = self._validated(role, resource, action)

        if not self.enforcer.add(policy):
            logger.debug("policy.add_noop", role=role, resource=resource, action=action)
            return MutationResult(changed=False)

        logger.info("policy.added", role=role, resource=resource, action=action)
        return await self._write_through(MutationResult(changed=True))

    async def remove_policy(self, role: str, resource: str, action: str) -> MutationResult:
        """
        Revoke (role, resource, action).

        Removing a malformed tuple is allowed so corrupt data can be cleaned up.

        Raises:
            NotInitializedError: If the enforcer has not been loaded
        """
        policy = PolicyTuple(role, resource, action)

        if not self.enforcer.remove(policy):
            logger.debug("policy.remove_noop", role=role, resource=resource, action=action)
            return MutationResult(changed=False)

        logger.info("policy.removed", role=role, resource=resource, action=action)
        return await self._write_through(MutationResult(changed=True))

    async def replace_role_policies(
        self,
        role: str,
        grants: Iterable[tuple[str, str]],
    ) -> MutationResult:
        """
        Replace every tuple of one role with (resource, action) grants.

        Readers see the role's old grants or its new grants, never a mix.
        """
        policies = [self._validated(role, resource, action) for resource, action in grants]

        if not self.enforcer.replace_role(role, policies):
            return MutationResult(changed=False)

        logger.info("policy.role_replaced", role=role, count=len(set(policies)))
        return await self._write_through(MutationResult(changed=True))

    # ============================================================
    # QUERIES / FULL SYNC
    # ============================================================

    def list_policies(self, role: str | None = None) -> list[PolicyTuple]:
        if role is not None:
            return self.enforcer.policies_for_role(role)
        return self.enforcer.list_policies()

    async def synchronize(self) -> SyncResult:
        return await self.synchronizer.synchronize()

    # ============================================================
    # HELPERS
    # ============================================================

    def _validated(self, role: str, resource: str, action: str) -> PolicyTuple:
        policy = PolicyTuple(role, resource, action)
        problem = find_malformation(policy)
        if problem:
            raise InvalidPolicyError(problem)
        return policy

    async def _write_through(self, result: MutationResult) -> MutationResult:
        await self.synchronizer.mirror(self.enforcer.snapshot(), result)
        return result
