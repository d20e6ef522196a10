"""Task API schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TaskCreateRequest(BaseModel):
    """Request body for creating a task."""

    title: str = Field(..., min_length=1, max_length=500)
    topic: str | None = Field(default=None, max_length=255)
    description: str | None = None
    priority: str = Field(default="medium", description="low | medium | high | urgent")
    deadline: datetime | None = None
    project_id: str | None = None


class TaskUpdateRequest(BaseModel):
    """Partial update. Only fields present in the body are applied; null clears."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=500)
    topic: str | None = Field(default=None, max_length=255)
    description: str | None = None
    priority: str | None = None
    deadline: datetime | None = None
    assigned_to: str | None = None
    status: str | None = None

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent (explicit nulls included)."""
        return self.model_dump(exclude_unset=True)


class ApproveTaskRequest(BaseModel):
    """Optional body for POST /tasks/{id}/approve."""

    assigned_to: str | None = None


class DirectApproveRequest(BaseModel):
    """Body for POST /tasks/{id}/direct-approve."""

    approver_employee_id: str | None = None
    note: str | None = Field(default=None, max_length=2000)


class BulkApproveRequest(BaseModel):
    task_ids: list[str] = Field(..., min_length=1, max_length=500)


class AssigneeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    employee_name: str | None
    created_at: datetime


class TaskResponse(BaseModel):
    """Task with its assignee list (empty on write responses)."""

    model_config = ConfigDict(from_attributes=True)

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
    assignees: list[AssigneeResponse] = Field(default_factory=list)


class ToggleAssigneeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    task_id: str
    employee_id: str
    action: Literal["added", "removed"]
    assigned_to: str | None


class TaskStatsResponse(BaseModel):
    """Dashboard counters."""

    model_config = ConfigDict(from_attributes=True)

    open: int
    pending_approval: int
    completed: int
    overdue: int


class BulkItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    task_id: str
    success: bool
    error: str | None = None
    error_code: str | None = None


class BulkApproveResponse(BaseModel):
    """Aggregate outcome; reported only after every item settled."""

    model_config = ConfigDict(from_attributes=True)

    succeeded: int
    failed: int
    results: list[BulkItemResponse]
