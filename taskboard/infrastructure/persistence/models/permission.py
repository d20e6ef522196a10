"""UserRole and PermissionSetting ORM models."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from taskboard.infrastructure.persistence.database import Base
from taskboard.infrastructure.persistence.models.mixins import (
    BaseModel,
    CuidMixin,
    VersionedMixin,
)

_ROLE_CHECK = "role IN ('ceo', 'admin', 'manager', 'editor', 'team_member', 'viewer')"


class UserRole(CuidMixin, Base):
    """Access role held by a user. Table: user_role. Unique (user_id, role)."""

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_role"),
        CheckConstraint(_ROLE_CHECK, name="ck_user_role_role"),
    )


class PermissionSetting(BaseModel, VersionedMixin, Base):
    """Per-role override record. Table: permission_setting.

    One nullable column per capability flag: NULL means the flag is absent and
    the role default applies.
    """

    __tablename__ = "permission_setting"

    role: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)

    can_view_tasks: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_create_tasks: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_edit_tasks: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_delete_tasks: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_view_projects: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_create_projects: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_edit_projects: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_delete_projects: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_view_team: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_manage_team: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_view_procedures: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_manage_procedures: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_view_decisions: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_manage_decisions: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_view_security_docs: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_manage_security_docs: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True
    )
    can_manage_users: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    can_manage_permissions: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True
    )

    __table_args__ = (CheckConstraint(_ROLE_CHECK, name="ck_permission_setting_role"),)
