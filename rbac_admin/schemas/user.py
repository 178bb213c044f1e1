"""
User schemas.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    """User creation schema. role is a role name."""
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^\S+$")
    email: EmailStr
    nickname: str | None = Field(None, max_length=50)
    phone: str | None = Field(None, max_length=20)
    role: str = Field("user", min_length=1, max_length=50)
    status: Literal[0, 1] = 1


class UserUpdate(BaseModel):
    """User update schema (administrators)."""
    email: EmailStr | None = None
    nickname: str | None = Field(None, max_length=50)
    avatar: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=20)
    role: str | None = Field(None, min_length=1, max_length=50)


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own account."""
    nickname: str | None = Field(None, max_length=50)
    avatar: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=20)


class UserResponse(BaseModel):
    """User response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    nickname: str | None = None
    avatar: str | None = None
    phone: str | None = None
    role: str = Field(validation_alias="role_name")
    status: int
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    """Paginated user list response."""
    users: list[UserResponse]
    total: int
    page: int
    per_page: int
