"""Task domain rules: status transitions and dashboard statistics.

Independent of persistence. The task state machine is advisory by default:
any status may be set. validate_status_transition is applied only when
transition enforcement is switched on.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from taskboard.domain.enums import TaskStatus
from taskboard.domain.exceptions import ValidationException

ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.NEW: frozenset({TaskStatus.APPROVED}),
    TaskStatus.APPROVED: frozenset({TaskStatus.NEW, TaskStatus.IN_PROGRESS}),
    TaskStatus.IN_PROGRESS: frozenset(
        {
            TaskStatus.APPROVED,
            TaskStatus.PARTIALLY_DONE,
            TaskStatus.STUCK,
            TaskStatus.DONE,
        }
    ),
    TaskStatus.PARTIALLY_DONE: frozenset(
        {TaskStatus.IN_PROGRESS, TaskStatus.STUCK, TaskStatus.DONE}
    ),
    TaskStatus.STUCK: frozenset(
        {TaskStatus.IN_PROGRESS, TaskStatus.PARTIALLY_DONE, TaskStatus.DONE}
    ),
    TaskStatus.DONE: frozenset({TaskStatus.IN_PROGRESS}),
}

OPEN_STATUSES: frozenset[TaskStatus] = frozenset(
    {TaskStatus.NEW, TaskStatus.APPROVED, TaskStatus.IN_PROGRESS}
)


def is_transition_allowed(current: TaskStatus, target: TaskStatus) -> bool:
    """Return True if target is reachable from current in one step (same status always is)."""
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def validate_status_transition(current: TaskStatus, target: TaskStatus) -> None:
    """Raise ValidationException if moving from current to target is not allowed."""
    if not is_transition_allowed(current, target):
        raise ValidationException(
            f"Cannot change task status from '{current.value}' to '{target.value}'",
            field="status",
        )


def validate_title(title: str | None) -> str:
    """Return the stripped title; raise ValidationException if empty."""
    if title is None or not title.strip():
        raise ValidationException("Task title is required", field="title")
    return title.strip()


@dataclass(frozen=True)
class TaskStats:
    """Aggregate task counts for the dashboard. Recomputed on demand."""

    open: int = 0
    pending_approval: int = 0
    completed: int = 0
    overdue: int = 0

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[tuple[TaskStatus | str, datetime | None]],
        now: datetime,
    ) -> "TaskStats":
        """Compute stats from (status, deadline) pairs.

        Overdue means deadline < now and status is not done.
        """
        open_count = pending = completed = overdue = 0
        for raw_status, deadline in rows:
            status = TaskStatus(raw_status)
            if status in OPEN_STATUSES:
                open_count += 1
            if status == TaskStatus.NEW:
                pending += 1
            if status == TaskStatus.DONE:
                completed += 1
            elif deadline is not None and deadline < now:
                overdue += 1
        return cls(
            open=open_count,
            pending_approval=pending,
            completed=completed,
            overdue=overdue,
        )
