"""
Database models.
"""

from .base import (
    Base,
    TimestampMixin,
    IntegerIdMixin,
    StatusMixin,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
)
from .rbac import (
    Role,
    Permission,
    PolicyRule,
    role_permissions,
    PERMISSION_ACTIONS,
    PERMISSION_TYPES,
)
from .user import User

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "IntegerIdMixin",
    "StatusMixin",
    "STATUS_ACTIVE",
    "STATUS_INACTIVE",
    # RBAC
    "Role",
    "Permission",
    "PolicyRule",
    "role_permissions",
    "PERMISSION_ACTIONS",
    "PERMISSION_TYPES",
    # Users
    "User",
]
