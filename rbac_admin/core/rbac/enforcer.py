"""
In-memory policy enforcer.

The live policy set is an immutable PolicySnapshot. Readers take a
reference to the current snapshot and evaluate against it without locking.
Writers build a complete replacement under a lock and swap the reference,
so a concurrent reader sees either the old set or the new set in full.

Usage:
    enforcer = Enforcer()
    enforcer.load([PolicyTuple("admin", "/api/*", "*")])

    enforcer.enforce("admin", "/api/roles", "DELETE")  # True
    enforcer.enforce("guest", "/api/roles", "GET")     # False
"""

import threading
from collections import defaultdict
from typing import Iterable

import structlog

from .errors import MatchError, NotInitializedError
from .interfaces import PolicyTuple
from .matcher import CompiledRule, compile_rule, find_malformation

logger = structlog.get_logger(__name__)


class PolicySnapshot:
    """
    Immutable, deduplicated policy set indexed by role.

    Malformed tuples are kept (they are part of the set and are persisted)
    but are recorded per role so any decision for that role fails closed.
    """

    __slots__ = ("version", "_tuples", "_rules", "_malformed")

    def __init__(self, tuples: Iterable[PolicyTuple], version: int):
        self.version = version
        self._tuples = frozenset(tuples)

        rules: dict[str, list[CompiledRule]] = defaultdict(list)
        malformed: dict[str, list[str]] = defaultdict(list)
        for policy in self._tuples:
            problem = find_malformation(policy)
            if problem:
                malformed[policy.role].append(problem)
            else:
                rules[policy.role].append(compile_rule(policy))

        self._rules = {role: tuple(items) for role, items in rules.items()}
        self._malformed = {role: tuple(items) for role, items in malformed.items()}

        if self._malformed:
            logger.error(
                "policy.malformed_tuples",
                version=version,
                roles=sorted(str(role) for role in self._malformed),
            )

    def __len__(self) -> int:
        return len(self._tuples)

    def __contains__(self, policy: object) -> bool:
        return policy in self._tuples

    @property
    def tuples(self) -> frozenset[PolicyTuple]:
        return self._tuples

    def sorted(self) -> list[PolicyTuple]:
        return sorted(self._tuples, key=lambda p: tuple(str(v) for v in p.as_list()))

    def for_role(self, role: str) -> list[PolicyTuple]:
        return [p for p in self.sorted() if p.role == role]

    def enforce(self, role: str, resource: str, action: str) -> bool:
        """
        Decide one request against this snapshot.

        Raises:
            MatchError: If any tuple for the role is malformed
        """
        problems = self._malformed.get(role)
        if problems:
            raise MatchError(f"malformed policy for role {role!r}: {problems[0]}")

        if not isinstance(resource, str) or not isinstance(action, str):
            return False

        return any(rule.matches(resource, action) for rule in self._rules.get(role, ()))


class Enforcer:
    """
    Holds the live PolicySnapshot.

    enforce() is safe to call from any thread or task at any time. All
    mutations go through the write lock and replace the snapshot wholesale.
    """

    def __init__(self):
        self._snapshot: PolicySnapshot | None = None
        self._write_lock = threading.Lock()
        self._version = 0

    @property
    def initialized(self) -> bool:
        return self._snapshot is not None

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> PolicySnapshot:
        """
        Return the current snapshot.

        Raises:
            NotInitializedError: If no policy set has been loaded yet
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise NotInitializedError("policy set has not been loaded")
        return snapshot

    def count(self) -> int:
        snapshot = self._snapshot
        return len(snapshot) if snapshot is not None else 0

    # ============================================================
    # READS
    # ============================================================

    def enforce(self, role: str, resource: str, action: str) -> bool:
        """
        Return True if any tuple grants (role, resource, action).

        Raises:
            NotInitializedError: Before the first load
            MatchError: If the role has a malformed tuple
        """
        return self.snapshot().enforce(role, resource, action)

    def list_policies(self) -> list[PolicyTuple]:
        return self.snapshot().sorted()

    def policies_for_role(self, role: str) -> list[PolicyTuple]:
        return self.snapshot().for_role(role)

    # ============================================================
    # WRITES
    # ============================================================

    def load(self, tuples: Iterable[PolicyTuple]) -> PolicySnapshot:
        """Replace the whole policy set. Initializes the enforcer."""
        tuples = list(tuples)
        with self._write_lock:
            return self._swap(tuples)

    def add(self, policy: PolicyTuple) -> bool:
        """Add one tuple. Returns False if it was already present."""
        with self._write_lock:
            current = self.snapshot()
            if policy in current:
                return False
            self._swap(current.tuples | {policy})
            return True

    def remove(self, policy: PolicyTuple) -> bool:
        """Remove one tuple. Returns False if it was absent."""
        with self._write_lock:
            current = self.snapshot()
            if policy not in current:
                return False
            self._swap(current.tuples - {policy})
            return True

    def replace_role(self, role: str, tuples: Iterable[PolicyTuple]) -> bool:
        """
        Replace every tuple of one role in a single swap.

        Returns False if the role's tuple set is unchanged.
        """
        replacement = {p for p in tuples if p.role == role}
        with self._write_lock:
            current = self.snapshot()
            existing = {p for p in current.tuples if p.role == role}
            if existing == replacement:
                return False
            self._swap((current.tuples - existing) | replacement)
            return True

    def _swap(self, tuples: Iterable[PolicyTuple]) -> PolicySnapshot:
        # Caller holds the write lock.
        self._version += 1
        snapshot = PolicySnapshot(tuples, self._version)
        self._snapshot = snapshot
        logger.debug("policy.snapshot_swapped", version=snapshot.version, count=len(snapshot))
        return snapshot
