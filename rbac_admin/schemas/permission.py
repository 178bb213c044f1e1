"""
Permission schemas.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PermissionAction = Literal["GET", "POST", "PUT", "DELETE", "*"]
PermissionType = Literal["menu", "button", "api"]


def validate_resource_pattern(value: str) -> str:
    """A request path, or a prefix pattern with "*" as its last character."""
    if not value or not value.strip():
        raise ValueError("resource must not be empty")
    if "*" in value[:-1]:
        raise ValueError("'*' is only allowed as the last character of a resource")
    return value


class PermissionCreate(BaseModel):
    """Permission creation schema."""
    parent_id: int | None = None
    name: str = Field(..., min_length=1, max_length=100, pattern=r"^\S+$")
    display_name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=255)
    resource: str = Field(..., max_length=255)
    action: PermissionAction
    type: PermissionType = "api"
    sort: int = 0
    status: Literal[0, 1] = 1

    @field_validator("resource")
    @classmethod
    def check_resource(cls, v: str) -> str:
        return validate_resource_pattern(v)


class PermissionUpdate(BaseModel):
    """Permission update schema."""
    parent_id: int | None = None
    name: str | None = Field(None, min_length=1, max_length=100, pattern=r"^\S+$")
    display_name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=255)
    resource: str | None = Field(None, max_length=255)
    action: PermissionAction | None = None
    type: PermissionType | None = None
    sort: int | None = None

    @field_validator("resource")
    @classmethod
    def check_resource(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return validate_resource_pattern(v)


class PermissionResponse(BaseModel):
    """Permission response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    parent_id: int | None = None
    name: str
    display_name: str
    description: str | None = None
    resource: str
    action: str
    type: str
    sort: int
    status: int
    created_at: datetime
    updated_at: datetime


class PermissionListResponse(BaseModel):
    """Paginated permission list response."""
    permissions: list[PermissionResponse]
    total: int
    page: int
    per_page: int
