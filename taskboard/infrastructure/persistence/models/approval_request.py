"""TaskApprovalRequest ORM model (delegated approval links)."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.infrastructure.persistence.database import Base
from taskboard.infrastructure.persistence.models.mixins import BaseModel


class TaskApprovalRequest(BaseModel, Base):
    """Approval request. Table: task_approval_request.

    token_hash is the SHA-256 of the link token; the token itself is never stored.
    responded_at is set exactly when status leaves 'pending'.
    """

    __tablename__ = "task_approval_request"

    task_id: Mapped[str] = mapped_column(
        String, ForeignKey("task.id", ondelete="CASCADE"), nullable=False
    )
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    requested_by: Mapped[str] = mapped_column(String, nullable=False)
    requested_from: Mapped[str] = mapped_column(
        String, ForeignKey("employee.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="pending", server_default="pending"
    )
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    response_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'expired')",
            name="ck_task_approval_request_status",
        ),
        Index("ix_task_approval_request_task_status", "task_id", "status"),
    )
