"""SQLAlchemy mixins for common model patterns (DRY).

Provides: CuidMixin, TimestampMixin, VersionedMixin and the combined BaseModel.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from taskboard.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class VersionedMixin:
    """Mixin for a write counter: version integer, default 1."""

    @declared_attr
    def version(cls) -> Mapped[int]:
        return mapped_column(Integer, default=1, server_default="1", nullable=False)


class BaseModel(CuidMixin, TimestampMixin):
    """Combined mixin: CUID primary key + created_at/updated_at."""

    __abstract__ = True
