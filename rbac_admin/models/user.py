"""
User model.

A user is an administered account bound to exactly one role. Access tokens
carry that role's name in the role claim; the gate authorizes on the claim
alone. There are no credentials here: tokens are issued elsewhere.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IntegerIdMixin, StatusMixin, TimestampMixin

if TYPE_CHECKING:
    from .rbac import Role


class User(Base, IntegerIdMixin, StatusMixin, TimestampMixin):
    """User account."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    nickname: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    role: Mapped["Role"] = relationship("Role", lazy="selectin")

    @property
    def role_name(self) -> str:
        return self.role.name

    def __repr__(self) -> str:
        return f"<User {self.username}>"
