"""
Policy schemas.
"""

from pydantic import BaseModel, Field

from .permission import PermissionAction


class PolicyRequest(BaseModel):
    """A (role, resource, action) tuple to add or remove."""
    role: str = Field(..., min_length=1, max_length=50)
    resource: str = Field(..., min_length=1, max_length=255)
    action: PermissionAction


class PolicyResponse(BaseModel):
    role: str
    resource: str
    action: str


class PolicyListResponse(BaseModel):
    policies: list[PolicyResponse]
    total: int
    version: int


class PolicyMutationResponse(BaseModel):
    """
    Result of an add / remove.

    changed is False when the call was a no-op. persisted is False when the
    in-memory change was applied but the policy_rules mirror was not
    updated; the next synchronization repairs it.
    """
    changed: bool
    persisted: bool


class SyncResponse(BaseModel):
    count: int
    version: int
    persisted: bool
