"""
RBAC Models - Roles, Permissions, associations and the policy mirror.

Roles and permissions are administered through the API. Each association
between an active role and an active permission becomes one policy tuple
(role.name, permission.resource, permission.action). policy_rules holds the
last tuple set the engine loaded; it is written by the engine and never
edited by hand.

Usage:
    role = Role(name="editor", display_name="Editor")
    perm = Permission(name="post.update", resource="/api/posts/*", action="PUT")
    role.permissions.append(perm)
"""

from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IntegerIdMixin, StatusMixin, TimestampMixin


PERMISSION_TYPES = ("menu", "button", "api")
PERMISSION_ACTIONS = ("GET", "POST", "PUT", "DELETE", "*")


# Many-to-many relationship between Role and Permission
role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base, IntegerIdMixin, StatusMixin, TimestampMixin):
    """
    Role definition.

    name is the identifier carried in access tokens and used in policy
    tuples. Roles have no hierarchy; a role's grants are exactly its
    associated permissions.
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        secondary=role_permissions,
        back_populates="roles",
        lazy="selectin",
        order_by="Permission.id",
    )

    def __repr__(self) -> str:
        return f"<Role {self.name}>"


class Permission(Base, IntegerIdMixin, StatusMixin, TimestampMixin):
    """
    Permission definition.

    resource is an exact request path or a prefix pattern ending in "*".
    action is an HTTP method or "*". parent_id groups permissions into a
    tree for display only; it has no effect on authorization.
    """

    __tablename__ = "permissions"

    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("permissions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    resource: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    type: Mapped[str] = mapped_column(String(20), default="api", nullable=False)
    sort: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    roles: Mapped[list["Role"]] = relationship(
        "Role",
        secondary=role_permissions,
        back_populates="permissions",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Permission {self.name} {self.action} {self.resource}>"


class PolicyRule(Base, IntegerIdMixin):
    """One row of the persisted policy set."""

    __tablename__ = "policy_rules"
    __table_args__ = (
        UniqueConstraint("role", "resource", "action", name="uq_policy_rule"),
    )

    role: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    resource: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)

    def __repr__(self) -> str:
        return f"<PolicyRule {self.role} {self.action} {self.resource}>"
