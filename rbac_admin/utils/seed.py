"""
Default roles, permissions and associations.

seed_defaults() is idempotent: existing rows (matched by name) are left
alone and existing associations are kept.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_admin.models import Permission, Role

logger = structlog.get_logger(__name__)


DEFAULT_ROLES = [
    {"name": "admin", "display_name": "Administrator", "description": "Full access to the system"},
    {"name": "user", "display_name": "User", "description": "Regular user"},
    {"name": "guest", "display_name": "Guest", "description": "Read-only visitor"},
]


def _crud(group: str, label: str, path: str) -> list[dict]:
    return [
        {"name": f"{group}.list", "display_name": f"List {label}s", "resource": path, "action": "GET"},
        {"name": f"{group}.create", "display_name": f"Create {label}", "resource": path, "action": "POST"},
        {"name": f"{group}.update", "display_name": f"Update {label}", "resource": f"{path}/*", "action": "PUT"},
        {"name": f"{group}.delete", "display_name": f"Delete {label}", "resource": f"{path}/*", "action": "DELETE"},
        {"name": f"{group}.detail", "display_name": f"View {label}", "resource": f"{path}/*", "action": "GET"},
    ]


DEFAULT_PERMISSIONS = [
    *_crud("user", "user", "/api/users"),
    *_crud("role", "role", "/api/roles"),
    *_crud("permission", "permission", "/api/permissions"),
    {"name": "auth.profile", "display_name": "View profile", "resource": "/api/auth/profile", "action": "GET"},
    {"name": "auth.update_profile", "display_name": "Update profile", "resource": "/api/auth/profile", "action": "PUT"},
    {"name": "system.all", "display_name": "Full system access", "resource": "/api/*", "action": "*"},
]

DEFAULT_ASSOCIATIONS = {
    "admin": ["system.all"],
    "user": ["auth.profile", "auth.update_profile", "user.list", "user.detail"],
    "guest": ["auth.profile"],
}


async def seed_defaults(db: AsyncSession) -> dict[str, int]:
    """Create missing default rows. Returns counts of what was created."""
    created = {"roles": 0, "permissions": 0, "associations": 0}

    roles: dict[str, Role] = {}
    for data in DEFAULT_ROLES:
        role = await db.scalar(select(Role).where(Role.name == data["name"]))
        if role is None:
            role = Role(**data)
            db.add(role)
            created["roles"] += 1
        roles[data["name"]] = role

    permissions: dict[str, Permission] = {}
    for sort, data in enumerate(DEFAULT_PERMISSIONS):
        permission = await db.scalar(select(Permission).where(Permission.name == data["name"]))
        if permission is None:
            permission = Permission(type="api", sort=sort, **data)
            db.add(permission)
            created["permissions"] += 1
        permissions[data["name"]] = permission

    await db.flush()

    for role_name, permission_names in DEFAULT_ASSOCIATIONS.items():
        role = roles[role_name]
        await db.refresh(role, ["permissions"])
        for name in permission_names:
            permission = permissions[name]
            if permission not in role.permissions:
                role.permissions.append(permission)
                created["associations"] += 1

    await db.commit()
    logger.info("rbac.seeded", **created)
    return created
