"""
Base model classes and mixins.

- TimestampMixin: created_at, updated_at (always use)
- StatusMixin: status flag shared by roles and permissions
"""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Integer, SmallInteger, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


STATUS_ACTIVE = 1
STATUS_INACTIVE = 0


class Base(DeclarativeBase):
    """Base class for all models."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


class TimestampMixin:
    """
    Mixin for created_at and updated_at timestamps.

    Usage:
        class MyModel(Base, TimestampMixin):
            __tablename__ = "my_table"
            ...
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class IntegerIdMixin:
    """Autoincrement integer primary key."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class StatusMixin:
    """
    1 = active, 0 = inactive.

    Only active roles and active permissions contribute policy tuples.
    """

    status: Mapped[int] = mapped_column(
        SmallInteger,
        default=STATUS_ACTIVE,
        server_default=str(STATUS_ACTIVE),
        nullable=False,
        index=True,
    )

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE
