"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
All repositories of one request share that request's session, so writes made
through several of them commit or roll back together.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from taskboard.application.dtos.approval import ApprovalRequestResult
    from taskboard.application.dtos.employee import EmployeeResult
    from taskboard.application.dtos.note import TaskNoteResult
    from taskboard.application.dtos.permission import PermissionOverrideResult
    from taskboard.application.dtos.task import AssigneeResult, TaskResult


# Task repository interface
class ITaskRepository(Protocol):
    """Protocol for task persistence."""

    async def get_by_id(self, task_id: str) -> TaskResult | None:
        """Return the task with its assignees, or None."""

    async def list_tasks(self, status: str | None = None) -> list[TaskResult]:
        """Return tasks newest first, each with its assignees; optionally filter by status."""

    async def create_task(
        self,
        *,
        title: str,
        topic: str | None,
        description: str | None,
        priority: str,
        deadline: datetime | None,
        project_id: str | None,
        created_by: str | None,
    ) -> TaskResult:
        """Insert a task in status 'new'."""

    async def update_task(
        self, task_id: str, fields: Mapping[str, Any]
    ) -> TaskResult | None:
        """Set the given columns (None clears a nullable column). Return None if task missing."""

    async def delete_task(self, task_id: str) -> bool:
        """Delete task and, via cascade, its assignments, approval requests and notes."""

    async def list_status_deadlines(self) -> list[tuple[str, datetime | None]]:
        """Return (status, deadline) for every task; input for dashboard stats."""


# Assignment repository interface
class IAssignmentRepository(Protocol):
    """Protocol for the task-employee assignment relation."""

    async def list_for_task(self, task_id: str) -> list[AssigneeResult]:
        """Return assignments oldest first (ties broken by id)."""

    async def exists(self, task_id: str, employee_id: str) -> bool:
        """Return True if the employee is assigned to the task."""

    async def add(self, task_id: str, employee_id: str) -> bool:
        """Insert assignment. Return False if a concurrent insert already created it."""

    async def remove(self, task_id: str, employee_id: str) -> bool:
        """Delete assignment. Return False if it was not present."""

    async def oldest_employee_id(self, task_id: str) -> str | None:
        """Return the employee of the oldest remaining assignment, or None."""


# Approval request repository interface
class IApprovalRequestRepository(Protocol):
    """Protocol for delegated approval requests. Tokens are only ever seen hashed."""

    async def create_request(
        self,
        *,
        task_id: str,
        token_hash: str,
        requested_by: str,
        requested_from: str,
        message: str | None,
        created_at: datetime,
        expires_at: datetime,
    ) -> ApprovalRequestResult:
        """Insert a pending request."""

    async def get_by_id(self, request_id: str) -> ApprovalRequestResult | None:
        """Return request by id, or None."""

    async def get_by_token_hash(self, token_hash: str) -> ApprovalRequestResult | None:
        """Return request by token hash, or None."""

    async def list_for_task(self, task_id: str) -> list[ApprovalRequestResult]:
        """Return requests newest first with employee and requester display names."""

    async def transition_if_pending(
        self,
        request_id: str,
        status: str,
        now: datetime,
        response_note: str | None = None,
    ) -> ApprovalRequestResult | None:
        """Compare-and-set pending -> status (sets responded_at). None if no longer pending."""

    async def expire_pending_for_task(self, task_id: str, now: datetime) -> int:
        """Mark every pending request of the task expired. Return count."""

    async def force_expire(
        self, request_id: str, now: datetime
    ) -> ApprovalRequestResult | None:
        """Set status expired whatever the current status. None if request missing."""


# Employee repository interface
class IEmployeeRepository(Protocol):
    """Protocol for employee lookups."""

    async def get_by_id(self, employee_id: str) -> EmployeeResult | None:
        """Return employee by id, or None."""

    async def get_by_user_id(self, user_id: str) -> EmployeeResult | None:
        """Return the employee linked to an authenticated user, or None."""

    async def list_employees(self, active_only: bool = True) -> list[EmployeeResult]:
        """Return employees ordered by name."""


# Profile repository interface
class IProfileRepository(Protocol):
    """Protocol for user profile lookups (display names)."""

    async def get_display_name(self, user_id: str) -> str | None:
        """Return the user's full name, or None."""


# User role repository interface
class IUserRoleRepository(Protocol):
    """Protocol for access-role assignments."""

    async def get_roles(self, user_id: str) -> list[str]:
        """Return every role name assigned to the user (possibly empty)."""


# Permission override repository interface
class IPermissionOverrideRepository(Protocol):
    """Protocol for per-role permission override records."""

    async def get_by_role(self, role: str) -> PermissionOverrideResult | None:
        """Return the role's override record, or None."""

    async def list_all(self) -> list[PermissionOverrideResult]:
        """Return every override record ordered by role."""

    async def upsert(
        self,
        role: str,
        flags: Mapping[str, bool | None],
        *,
        replace: bool = False,
    ) -> PermissionOverrideResult:
        """Write flags for role and bump version.

        With replace=False only the given flags change; with replace=True every
        flag not given is cleared.
        """


# Task note repository interface
class ITaskNoteRepository(Protocol):
    """Protocol for free-text notes attached to a task."""

    async def create_note(
        self, *, task_id: str, content: str, created_by: str | None
    ) -> TaskNoteResult:
        """Insert a note."""

    async def list_for_task(self, task_id: str) -> list[TaskNoteResult]:
        """Return notes newest first."""

    async def get_by_id(self, note_id: str) -> TaskNoteResult | None:
        """Return note by id, or None."""

    async def delete_note(self, note_id: str) -> bool:
        """Delete note. Return False if missing."""
