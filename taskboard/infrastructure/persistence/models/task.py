"""Task, TaskAssignee and TaskNote ORM models."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from taskboard.infrastructure.persistence.database import Base
from taskboard.infrastructure.persistence.models.mixins import BaseModel, CuidMixin


class Task(BaseModel, Base):
    """Task. Table: task. approved_by and approved_at are set together or not at all."""

    __tablename__ = "task"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    topic: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(
        String(16), nullable=False, default="medium", server_default="medium"
    )
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="new", server_default="new"
    )
    deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    assigned_to: Mapped[str | None] = mapped_column(
        String, ForeignKey("employee.id", ondelete="SET NULL"), nullable=True, index=True
    )
    # User id from the identity provider (no local users table).
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)
    # An employee who approved a task cannot be deleted.
    approved_by: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("employee.id", ondelete="RESTRICT", name="fk_task_approved_by"),
        nullable=True,
    )
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    approval_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    project_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('new', 'approved', 'in_progress', 'partially_done', 'stuck', 'done')",
            name="ck_task_status",
        ),
        CheckConstraint(
            "priority IN ('low', 'medium', 'high', 'urgent')",
            name="ck_task_priority",
        ),
        CheckConstraint(
            "(approved_by IS NULL) = (approved_at IS NULL)",
            name="ck_task_approval_pair",
        ),
        Index("ix_task_status_created", "status", "created_at"),
    )


class TaskAssignee(CuidMixin, Base):
    """Task-employee assignment. Table: task_assignee. Unique (task_id, employee_id)."""

    __tablename__ = "task_assignee"

    task_id: Mapped[str] = mapped_column(
        String, ForeignKey("task.id", ondelete="CASCADE"), nullable=False
    )
    employee_id: Mapped[str] = mapped_column(
        String, ForeignKey("employee.id", ondelete="CASCADE"), nullable=False
    )
    # clock_timestamp(): inserts within one transaction still get distinct times.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.clock_timestamp(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("task_id", "employee_id", name="uq_task_assignee"),
        Index("ix_task_assignee_task_created", "task_id", "created_at"),
    )


class TaskNote(BaseModel, Base):
    """Free-text note on a task. Table: task_note."""

    __tablename__ = "task_note"

    task_id: Mapped[str] = mapped_column(
        String, ForeignKey("task.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)
