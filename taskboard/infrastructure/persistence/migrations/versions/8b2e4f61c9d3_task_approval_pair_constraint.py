"""Task approval: approved_by restricts employee deletes, pair check

Revision ID: 8b2e4f61c9d3
Revises: 3f9a1c2d7b40
Create Date: 2026-10-19 14:00:00.000000

"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8b2e4f61c9d3"
down_revision: Union[str, Sequence[str], None] = "3f9a1c2d7b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Replace the SET NULL foreign key on task.approved_by and add the pair check."""
    # Rows left half-cleared by the old SET NULL rule.
    op.execute(
        "UPDATE task SET approved_at = NULL "
        "WHERE approved_by IS NULL AND approved_at IS NOT NULL"
    )
    op.drop_constraint("task_approved_by_fkey", "task", type_="foreignkey")
    op.create_foreign_key(
        "fk_task_approved_by",
        "task",
        "employee",
        ["approved_by"],
        ["id"],
        ondelete="RESTRICT",
    )
    op.create_check_constraint(
        "ck_task_approval_pair",
        "task",
        "(approved_by IS NULL) = (approved_at IS NULL)",
    )


def downgrade() -> None:
    """Restore the SET NULL foreign key without the pair check."""
    op.drop_constraint("ck_task_approval_pair", "task", type_="check")
    op.drop_constraint("fk_task_approved_by", "task", type_="foreignkey")
    op.create_foreign_key(
        "task_approved_by_fkey",
        "task",
        "employee",
        ["approved_by"],
        ["id"],
        ondelete="SET NULL",
    )
