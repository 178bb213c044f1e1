"""
Data access layer.
"""

from .base import BaseRepository
from .permission import PermissionRepository
from .role import RoleRepository
from .user import UserRepository

__all__ = ["BaseRepository", "PermissionRepository", "RoleRepository", "UserRepository"]
