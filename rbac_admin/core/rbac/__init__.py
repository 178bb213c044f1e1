"""
Role-based policy engine.

    Enforcer            in-memory policy set, answers enforce(role, resource, action)
    PolicySynchronizer  rebuilds the set from role/permission associations
    PolicyAdmin         direct add / remove with write-through
    AuthorizationGate   per-request allow / reject decision
    PolicyStore         storage collaborator (SqlAlchemyPolicyStore)
"""

from .admin import PolicyAdmin
from .enforcer import Enforcer, PolicySnapshot
from .errors import (
    AccessDeniedError,
    AuthorizationError,
    InvalidPolicyError,
    MatchError,
    MissingAuthContextError,
    NotAuthenticatedError,
    NotInitializedError,
    PersistenceError,
    PolicyError,
    SourceQueryError,
)
from .gate import AuthorizationGate
from .interfaces import GateDecision, MutationResult, PolicyStore, PolicyTuple, SyncResult
from .matcher import find_malformation, matches
from .synchronizer import PolicySynchronizer

__all__ = [
    # Engine
    "Enforcer",
    "PolicySnapshot",
    "PolicySynchronizer",
    "PolicyAdmin",
    "AuthorizationGate",
    # Interfaces
    "PolicyStore",
    "PolicyTuple",
    "GateDecision",
    "MutationResult",
    "SyncResult",
    # Matching
    "find_malformation",
    "matches",
    # Errors
    "AuthorizationError",
    "NotInitializedError",
    "MissingAuthContextError",
    "NotAuthenticatedError",
    "MatchError",
    "AccessDeniedError",
    "PolicyError",
    "InvalidPolicyError",
    "SourceQueryError",
    "PersistenceError",
]
