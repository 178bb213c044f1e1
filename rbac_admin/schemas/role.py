"""
Role schemas.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .permission import PermissionResponse


class RoleCreate(BaseModel):
    """Role creation schema."""
    name: str = Field(..., min_length=1, max_length=50, pattern=r"^\S+$")
    display_name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=255)
    status: Literal[0, 1] = 1


class RoleUpdate(BaseModel):
    """Role update schema."""
    name: str | None = Field(None, min_length=1, max_length=50, pattern=r"^\S+$")
    display_name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=255)


class StatusUpdate(BaseModel):
    """Enable / disable a role or permission."""
    status: Literal[0, 1]


class AssignPermissions(BaseModel):
    """Replace a role's permission set."""
    permission_ids: list[int] = Field(default_factory=list)


class RoleResponse(BaseModel):
    """Role response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    display_name: str
    description: str | None = None
    status: int
    created_at: datetime
    updated_at: datetime


class RoleDetailResponse(RoleResponse):
    """Role with its permissions."""
    permissions: list[PermissionResponse] = Field(default_factory=list)


class RoleListResponse(BaseModel):
    """Paginated role list response."""
    roles: list[RoleResponse]
    total: int
    page: int
    per_page: int
