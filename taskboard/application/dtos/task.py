"""DTOs for tasks and assignments (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal


@dataclass(frozen=True)
class AssigneeResult:
    """One task-employee assignment, with the employee's display name."""

    employee_id: str
    employee_name: str | None
    created_at: datetime


@dataclass(frozen=True)
class TaskResult:
    """Task read-model. assignees is filled on get/list, empty after writes."""

    id: str
    title: str
    topic: str | None
    description: str | None
    priority: str
    status: str
    deadline: datetime | None
    assigned_to: str | None
    created_by: str | None
    approved_by: str | None
    approved_at: datetime | None
    approval_note: str | None
    project_id: str | None
    created_at: datetime
    updated_at: datetime
    assignees: tuple[AssigneeResult, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ToggleAssigneeResult:
    """Outcome of ToggleAssignee: which way it went and the recomputed primary assignee."""

    task_id: str
    employee_id: str
    action: Literal["added", "removed"]
    assigned_to: str | None
