"""Declarative base and entity mixins for SQLAlchemy-mapped records.

Mapped classes combine :class:`Base` with :class:`EntityMixin` to satisfy
the entity contract, and add :class:`SoftDeleteMixin` to opt into soft
delete::

    class Order(SoftDeleteMixin, EntityMixin, Base):
        __tablename__ = "orders"
        total: Mapped[int]
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from repokit.domain.entity import utc_now


class Base(DeclarativeBase):
    """Declarative base shared by repokit-managed tables."""


class EntityMixin:
    """Id and audit timestamp columns."""

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    last_modified: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


class SoftDeleteMixin:
    """Nullable deletable flag."""

    is_deleted: Mapped[bool | None] = mapped_column(Boolean, default=False, nullable=True)
