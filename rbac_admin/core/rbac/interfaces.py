"""
Policy engine interfaces - Core abstractions.

The enforcer only ever sees PolicyTuple values. Where they come from
(the role/permission tables) and where they are mirrored to (the
policy_rules table) is hidden behind PolicyStore.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Sequence


# ============================================================
# POLICY TUPLE
# ============================================================

@dataclass(frozen=True, order=True)
class PolicyTuple:
    """
    One (role, resource-pattern, action) grant.

    Derived from an active role/permission association; it has no identity
    of its own and is recomputed on every synchronization.
    """
    role: str
    resource: str
    action: str

    def as_list(self) -> list[str]:
        return [self.role, self.resource, self.action]


# ============================================================
# GATE DECISION
# ============================================================

@dataclass
class GateDecision:
    """
    Result of an authorization gate check.

    Attributes:
        allowed: Whether the request may proceed
        reason: Public, non-leaking reason (None when allowed)
        status_code: HTTP status to reject with (200 when allowed)
        code: Machine-readable rejection code
    """
    allowed: bool
    reason: str | None = None
    status_code: int = 200
    code: str | None = None

    @classmethod
    def allow(cls) -> "GateDecision":
        return cls(allowed=True)

    @classmethod
    def reject(cls, reason: str, status_code: int, code: str) -> "GateDecision":
        return cls(allowed=False, reason=reason, status_code=status_code, code=code)


# ============================================================
# MUTATION RESULTS
# ============================================================

@dataclass
class MutationResult:
    """
    Outcome of AddPolicy / RemovePolicy.

    changed is False for idempotent no-ops. persistence_error is set when
    the in-memory change was applied but the write-through failed.
    persisted stays False without an error when a newer snapshot was
    already live; that snapshot is mirrored by its own writer.
    """
    changed: bool
    persisted: bool = False
    persistence_error: Exception | None = None


@dataclass
class SyncResult:
    """Outcome of a full synchronization."""
    count: int
    version: int
    persisted: bool = False
    persistence_error: Exception | None = None


# ============================================================
# POLICY STORE
# ============================================================

class PolicyStore(ABC):
    """
    Storage collaborator for the policy engine.

    Implementations:
    - SqlAlchemyPolicyStore: role/permission tables + policy_rules mirror
    """

    @abstractmethod
    async def load_active_role_permission_tuples(self) -> Sequence[PolicyTuple]:
        """
        Return (role.name, permission.resource, permission.action) for every
        association whose role and permission are both active.

        Raises:
            SourceQueryError: If the association data cannot be read
        """
        pass

    @abstractmethod
    async def persist_policy_snapshot(self, tuples: Iterable[PolicyTuple]) -> None:
        """
        Replace the persisted policy mirror with the given tuples.

        Raises:
            PersistenceError: If the write fails
        """
        pass
