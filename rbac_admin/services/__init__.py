"""
Business logic layer.
"""

from .permission import PermissionService
from .role import RoleService
from .user import UserService

__all__ = ["PermissionService", "RoleService", "UserService"]
