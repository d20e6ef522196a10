"""Initial schema: employees, tasks, assignments, approval requests, permissions

Revision ID: 3f9a1c2d7b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CAPABILITY_COLUMNS = (
    "can_view_tasks",
    "can_create_tasks",
    "can_edit_tasks",
    "can_delete_tasks",
    "can_view_projects",
    "can_create_projects",
    "can_edit_projects",
    "can_delete_projects",
    "can_view_team",
    "can_manage_team",
    "can_view_procedures",
    "can_manage_procedures",
    "can_view_decisions",
    "can_manage_decisions",
    "can_view_security_docs",
    "can_manage_security_docs",
    "can_manage_users",
    "can_manage_permissions",
)

ROLE_CHECK = "role IN ('ceo', 'admin', 'manager', 'editor', 'team_member', 'viewer')"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create initial schema."""
    # Employees and profiles
    op.create_table(
        "employee",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column("telegram_chat_id", sa.String(length=64), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("role", sa.String(length=255), nullable=True),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.Column("user_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_employee_user_id"), "employee", ["user_id"], unique=False)

    op.create_table(
        "profile",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # Tasks
    op.create_table(
        "task",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("topic", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "priority", sa.String(length=16), server_default="medium", nullable=False
        ),
        sa.Column("status", sa.String(length=32), server_default="new", nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assigned_to", sa.String(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approval_note", sa.Text(), nullable=True),
        sa.Column("project_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('new', 'approved', 'in_progress', 'partially_done', 'stuck', 'done')",
            name="ck_task_status",
        ),
        sa.CheckConstraint(
            "priority IN ('low', 'medium', 'high', 'urgent')", name="ck_task_priority"
        ),
        sa.ForeignKeyConstraint(["assigned_to"], ["employee.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["approved_by"], ["employee.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_task_assigned_to"), "task", ["assigned_to"], unique=False)
    op.create_index(op.f("ix_task_project_id"), "task", ["project_id"], unique=False)
    op.create_index("ix_task_status_created", "task", ["status", "created_at"])

    op.create_table(
        "task_assignee",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("task_id", sa.String(), nullable=False),
        sa.Column("employee_id", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("clock_timestamp()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["task_id"], ["task.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["employee_id"], ["employee.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("task_id", "employee_id", name="uq_task_assignee"),
    )
    op.create_index(
        "ix_task_assignee_task_created", "task_assignee", ["task_id", "created_at"]
    )

    op.create_table(
        "task_note",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("task_id", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["task_id"], ["task.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_task_note_task_id"), "task_note", ["task_id"], unique=False)

    # Delegated approval requests (token stored as SHA-256 hex)
    op.create_table(
        "task_approval_request",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("task_id", sa.String(), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("requested_by", sa.String(), nullable=False),
        sa.Column("requested_from", sa.String(), nullable=False),
        sa.Column(
            "status", sa.String(length=16), server_default="pending", nullable=False
        ),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("response_note", sa.Text(), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'expired')",
            name="ck_task_approval_request_status",
        ),
        sa.ForeignKeyConstraint(["task_id"], ["task.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["requested_from"], ["employee.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token_hash"),
    )
    op.create_index(
        "ix_task_approval_request_task_status",
        "task_approval_request",
        ["task_id", "status"],
    )

    # Access roles and per-role override matrix
    op.create_table(
        "user_role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint(ROLE_CHECK, name="ck_user_role_role"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "role", name="uq_user_role"),
    )
    op.create_index(op.f("ix_user_role_user_id"), "user_role", ["user_id"], unique=False)

    op.create_table(
        "permission_setting",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        *(sa.Column(name, sa.Boolean(), nullable=True) for name in CAPABILITY_COLUMNS),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        *_timestamps(),
        sa.CheckConstraint(ROLE_CHECK, name="ck_permission_setting_role"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("role"),
    )


def downgrade() -> None:
    """Drop initial schema."""
    op.drop_table("permission_setting")
    op.drop_index(op.f("ix_user_role_user_id"), table_name="user_role")
    op.drop_table("user_role")
    op.drop_index("ix_task_approval_request_task_status", table_name="task_approval_request")
    op.drop_table("task_approval_request")
    op.drop_index(op.f("ix_task_note_task_id"), table_name="task_note")
    op.drop_table("task_note")
    op.drop_index("ix_task_assignee_task_created", table_name="task_assignee")
    op.drop_table("task_assignee")
    op.drop_index("ix_task_status_created", table_name="task")
    op.drop_index(op.f("ix_task_project_id"), table_name="task")
    op.drop_index(op.f("ix_task_assigned_to"), table_name="task")
    op.drop_table("task")
    op.drop_table("profile")
    op.drop_index(op.f("ix_employee_user_id"), table_name="employee")
    op.drop_table("employee")
