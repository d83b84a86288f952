"""
SQLAlchemy Base Model and Mixins

Provides base class and common mixins for all portal models.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, event, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class IntegerPrimaryKeyMixin:
    """Mixin for store-assigned integer primary keys.

    Courses, competencies, assignments, submissions and attachments are
    addressed by integers issued by the database. Users are keyed by the
    opaque auth identity instead and do not use this mixin.
    """

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True, comment="Store-assigned id"
    )


class CreatedAtMixin:
    """Mixin for an immutable creation timestamp (UTC)."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
        comment="Creation timestamp (UTC)",
    )


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at timestamps.

    All timestamps use UTC (timezone-aware).
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
        comment="Last update timestamp (UTC)",
    )


@event.listens_for(CreatedAtMixin, "init", propagate=True)
def receive_init_timestamps(target, args, kwargs):  # type: ignore[no-untyped-def]
    """Auto-generate timestamps on instance creation if not provided."""
    now = datetime.now(UTC)
    if "created_at" not in kwargs:
        target.created_at = now
    if isinstance(target, TimestampMixin) and "updated_at" not in kwargs:
        target.updated_at = now
