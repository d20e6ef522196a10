"""Task operations: the task lifecycle state machine and the assignment relation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from functools import partial
from typing import Any

from taskboard.application.dtos.actor import ActorContext
from taskboard.application.dtos.task import TaskResult, ToggleAssigneeResult
from taskboard.application.interfaces.repositories import (
    IAssignmentRepository,
    IEmployeeRepository,
    ITaskRepository,
)
from taskboard.application.interfaces.services import IAfterCommit, IChangePublisher
from taskboard.application.services.after_commit import after_commit_or_now
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.domain.entities.task import (
    TaskStats,
    validate_status_transition,
    validate_title,
)
from taskboard.domain.enums import ChangeTopic, TaskPriority, TaskStatus
from taskboard.domain.exceptions import (
    ResourceNotFoundException,
    ValidationException,
)
from taskboard.shared.utils.datetime import Clock, utc_now

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"title", "topic", "description", "priority", "deadline", "assigned_to", "status"}
)
# Fields that may be cleared with an explicit null.
_NULLABLE_FIELDS = frozenset({"topic", "description", "deadline", "assigned_to"})


def _parse_priority(value: Any) -> TaskPriority:
    try:
        return TaskPriority(value)
    except ValueError as e:
        raise ValidationException(
            f"Invalid priority '{value}'. Must be one of: {', '.join(TaskPriority.values())}",
            field="priority",
        ) from e


def _parse_status(value: Any) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError as e:
        raise ValidationException(
            f"Invalid status '{value}'. Must be one of: {', '.join(TaskStatus.values())}",
            field="status",
        ) from e


class TaskService:
    """Create, query and transition tasks; toggle assignees.

    Every operation takes the caller's ActorContext and checks one capability.
    Status changes are free unless enforce_transitions is set, in which case
    the allowed-transition table applies. Successful writes publish a change
    notification when a publisher is configured; given after_commit, the
    notification waits until the transaction has committed.
    """

    def __init__(
        self,
        task_repo: ITaskRepository,
        assignment_repo: IAssignmentRepository,
        employee_repo: IEmployeeRepository,
        publisher: IChangePublisher | None = None,
        *,
        enforce_transitions: bool = False,
        after_commit: IAfterCommit | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.task_repo = task_repo
        self.assignment_repo = assignment_repo
        self.employee_repo = employee_repo
        self.publisher = publisher
        self.enforce_transitions = enforce_transitions
        self.after_commit = after_commit
        self.clock = clock

    async def _publish(
        self, topic: ChangeTopic, action: str, payload: dict[str, Any]
    ) -> None:
        if self.publisher is not None:
            await after_commit_or_now(
                self.after_commit, partial(self.publisher.publish, topic, action, payload)
            )

    async def _get_or_404(self, task_id: str) -> TaskResult:
        task = await self.task_repo.get_by_id(task_id)
        if not task:
            raise ResourceNotFoundException("task", task_id)
        return task

    async def _require_employee(self, employee_id: str) -> None:
        if not await self.employee_repo.get_by_id(employee_id):
            raise ResourceNotFoundException("employee", employee_id)

    def _check_transition(self, current: str, target: TaskStatus) -> None:
        if self.enforce_transitions:
            validate_status_transition(TaskStatus(current), target)

    async def ensure_approvable(self, task_id: str) -> None:
        """Raise ValidationException if enforced transitions forbid approving the task."""
        task = await self._get_or_404(task_id)
        self._check_transition(task.status, TaskStatus.APPROVED)

    async def create_task(
        self,
        actor: ActorContext,
        title: str,
        topic: str | None = None,
        description: str | None = None,
        priority: str = TaskPriority.MEDIUM.value,
        deadline: datetime | None = None,
        project_id: str | None = None,
    ) -> TaskResult:
        """Create a task in status 'new' owned by the actor."""
        AuthorizationService.require_capability(actor, "can_create_tasks")
        task = await self.task_repo.create_task(
            title=validate_title(title),
            topic=topic,
            description=description,
            priority=_parse_priority(priority).value,
            deadline=deadline,
            project_id=project_id,
            created_by=actor.user_id,
        )
        logger.info("Task %s created by %s", task.id, actor.user_id)
        await self._publish(ChangeTopic.TASKS, "created", {"task_id": task.id})
        return task

    async def get_task(self, actor: ActorContext, task_id: str) -> TaskResult:
        AuthorizationService.require_capability(actor, "can_view_tasks")
        return await self._get_or_404(task_id)

    async def list_tasks(
        self, actor: ActorContext, status: str | None = None
    ) -> list[TaskResult]:
        """Return tasks newest first, optionally only those in status."""
        AuthorizationService.require_capability(actor, "can_view_tasks")
        status_value = _parse_status(status).value if status else None
        return await self.task_repo.list_tasks(status=status_value)

    async def approve_task(
        self,
        actor: ActorContext,
        task_id: str,
        assigned_to: str | None = None,
    ) -> TaskResult:
        """Set status 'approved' and, when given, the primary assignee. Re-approving is allowed."""
        AuthorizationService.require_capability(actor, "can_edit_tasks")
        task = await self._get_or_404(task_id)
        self._check_transition(task.status, TaskStatus.APPROVED)
        fields: dict[str, Any] = {"status": TaskStatus.APPROVED.value}
        if assigned_to:
            await self._require_employee(assigned_to)
            fields["assigned_to"] = assigned_to
        updated = await self.task_repo.update_task(task_id, fields)
        if updated is None:
            raise ResourceNotFoundException("task", task_id)
        await self._publish(ChangeTopic.TASKS, "approved", {"task_id": task_id})
        return updated

    async def direct_approve(
        self,
        actor: ActorContext,
        task_id: str,
        approver_employee_id: str | None = None,
        note: str | None = None,
    ) -> TaskResult:
        """Approve and record who approved it.

        Without an explicit approver, the employee linked to the actor's user
        is used. If none resolves, approved_by and approved_at are left as they
        are so they stay set or unset together.
        """
        AuthorizationService.require_capability(actor, "can_edit_tasks")
        task = await self._get_or_404(task_id)
        self._check_transition(task.status, TaskStatus.APPROVED)

        approver: str | None = None
        if approver_employee_id:
            await self._require_employee(approver_employee_id)
            approver = approver_employee_id
        else:
            employee = await self.employee_repo.get_by_user_id(actor.user_id)
            approver = employee.id if employee else None

        fields: dict[str, Any] = {
            "status": TaskStatus.APPROVED.value,
            "approval_note": note,
        }
        if approver:
            fields["approved_by"] = approver
            fields["approved_at"] = self.clock()
        else:
            logger.info(
                "Direct approval of task %s by %s has no linked employee; approver not recorded",
                task_id,
                actor.user_id,
            )
        updated = await self.task_repo.update_task(task_id, fields)
        if updated is None:
            raise ResourceNotFoundException("task", task_id)
        await self._publish(ChangeTopic.TASKS, "approved", {"task_id": task_id})
        return updated

    async def approve_by_delegate(
        self, task_id: str, approver_employee_id: str
    ) -> TaskResult:
        """Approve on behalf of the employee who answered an approval link.

        Called by the approval protocol after it consumed a token; the token is
        the authorization, so no actor is involved.
        """
        task = await self._get_or_404(task_id)
        self._check_transition(task.status, TaskStatus.APPROVED)
        updated = await self.task_repo.update_task(
            task_id,
            {
                "status": TaskStatus.APPROVED.value,
                "approved_by": approver_employee_id,
                "approved_at": self.clock(),
            },
        )
        if updated is None:
            raise ResourceNotFoundException("task", task_id)
        await self._publish(ChangeTopic.TASKS, "approved", {"task_id": task_id})
        return updated

    async def update_task(
        self,
        actor: ActorContext,
        task_id: str,
        fields: Mapping[str, Any],
    ) -> TaskResult:
        """Apply a partial update. Keys outside UPDATABLE_FIELDS are rejected."""
        AuthorizationService.require_capability(actor, "can_edit_tasks")
        unknown = sorted(set(fields) - UPDATABLE_FIELDS)
        if unknown:
            raise ValidationException(
                f"Field(s) cannot be updated: {', '.join(unknown)}", field=unknown[0]
            )
        task = await self._get_or_404(task_id)
        if not fields:
            return task

        changes: dict[str, Any] = {}
        for name, value in fields.items():
            if value is None and name not in _NULLABLE_FIELDS:
                raise ValidationException(f"{name} cannot be null", field=name)
            if name == "title":
                changes[name] = validate_title(value)
            elif name == "priority":
                changes[name] = _parse_priority(value).value
            elif name == "status":
                target = _parse_status(value)
                self._check_transition(task.status, target)
                changes[name] = target.value
            elif name == "assigned_to" and value is not None:
                await self._require_employee(value)
                changes[name] = value
            else:
                changes[name] = value

        updated = await self.task_repo.update_task(task_id, changes)
        if updated is None:
            raise ResourceNotFoundException("task", task_id)
        await self._publish(
            ChangeTopic.TASKS,
            "updated",
            {"task_id": task_id, "fields": sorted(changes)},
        )
        return updated

    async def delete_task(self, actor: ActorContext, task_id: str) -> None:
        """Delete task with its assignments, approval requests and notes."""
        AuthorizationService.require_capability(actor, "can_delete_tasks")
        if not await self.task_repo.delete_task(task_id):
            raise ResourceNotFoundException("task", task_id)
        logger.info("Task %s deleted by %s", task_id, actor.user_id)
        await self._publish(ChangeTopic.TASKS, "deleted", {"task_id": task_id})

    async def toggle_assignee(
        self, actor: ActorContext, task_id: str, employee_id: str
    ) -> ToggleAssigneeResult:
        """Add the employee if not assigned, remove otherwise; then recompute the primary assignee.

        The primary assignee is the employee of the oldest remaining assignment,
        or None when none remain.
        """
        AuthorizationService.require_capability(actor, "can_edit_tasks")
        await self._get_or_404(task_id)
        await self._require_employee(employee_id)

        if await self.assignment_repo.exists(task_id, employee_id):
            await self.assignment_repo.remove(task_id, employee_id)
            action = "removed"
        else:
            await self.assignment_repo.add(task_id, employee_id)
            action = "added"

        primary = await self.assignment_repo.oldest_employee_id(task_id)
        await self.task_repo.update_task(task_id, {"assigned_to": primary})
        await self._publish(
            ChangeTopic.ASSIGNMENTS,
            action,
            {"task_id": task_id, "employee_id": employee_id},
        )
        return ToggleAssigneeResult(
            task_id=task_id,
            employee_id=employee_id,
            action=action,
            assigned_to=primary,
        )

    async def get_stats(self, actor: ActorContext) -> TaskStats:
        """Dashboard counts, recomputed from current task rows."""
        AuthorizationService.require_capability(actor, "can_view_tasks")
        rows = await self.task_repo.list_status_deadlines()
        return TaskStats.from_rows(rows, self.clock())
