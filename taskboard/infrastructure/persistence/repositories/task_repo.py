"""Task and assignment repositories."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.dtos.task import AssigneeResult, TaskResult
from taskboard.infrastructure.persistence.models.employee import Employee
from taskboard.infrastructure.persistence.models.task import Task, TaskAssignee
from taskboard.infrastructure.persistence.repositories.base import BaseRepository
from taskboard.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def _to_result(t: Task, assignees: Sequence[AssigneeResult] = ()) -> TaskResult:
    """Map Task ORM to TaskResult DTO."""
    return TaskResult(
        id=t.id,
        title=t.title,
        topic=t.topic,
        description=t.description,
        priority=t.priority,
        status=t.status,
        deadline=ensure_utc(t.deadline),
        assigned_to=t.assigned_to,
        created_by=t.created_by,
        approved_by=t.approved_by,
        approved_at=ensure_utc(t.approved_at),
        approval_note=t.approval_note,
        project_id=t.project_id,
        created_at=ensure_utc(t.created_at),
        updated_at=ensure_utc(t.updated_at),
        assignees=tuple(assignees),
    )


async def _load_assignees(
    db: AsyncSession, task_ids: Sequence[str]
) -> dict[str, list[AssigneeResult]]:
    """Assignees per task, oldest assignment first."""
    if not task_ids:
        return {}
    result = await db.execute(
        select(
            TaskAssignee.task_id,
            TaskAssignee.employee_id,
            Employee.name,
            TaskAssignee.created_at,
        )
        .join(Employee, Employee.id == TaskAssignee.employee_id, isouter=True)
        .where(TaskAssignee.task_id.in_(task_ids))
        .order_by(TaskAssignee.created_at, TaskAssignee.id)
    )
    by_task: dict[str, list[AssigneeResult]] = defaultdict(list)
    for task_id, employee_id, name, created_at in result.all():
        by_task[task_id].append(
            AssigneeResult(
                employee_id=employee_id,
                employee_name=name,
                created_at=ensure_utc(created_at),
            )
        )
    return by_task


class TaskRepository(BaseRepository[Task]):
    """Task repository. Implements ITaskRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

    async def get_by_id(self, task_id: str) -> TaskResult | None:
        task = await self.get_entity_by_id(task_id)
        if task is None:
            return None
        assignees = await _load_assignees(self.db, [task.id])
        return _to_result(task, assignees.get(task.id, ()))

    async def list_tasks(self, status: str | None = None) -> list[TaskResult]:
        """Return tasks newest first with their assignees."""
        stmt = select(Task).order_by(Task.created_at.desc(), Task.id.desc())
        if status:
            stmt = stmt.where(Task.status == status)
        tasks = list((await self.db.execute(stmt)).scalars().all())
        assignees = await _load_assignees(self.db, [t.id for t in tasks])
        return [_to_result(t, assignees.get(t.id, ())) for t in tasks]

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
        """Create a task in status 'new' and return the result DTO."""
        task = await self.create(
            Task(
                title=title,
                topic=topic,
                description=description,
                priority=priority,
                status="new",
                deadline=deadline,
                project_id=project_id,
                created_by=created_by,
            )
        )
        return _to_result(task)

    async def update_task(
        self, task_id: str, fields: Mapping[str, Any]
    ) -> TaskResult | None:
        task = await self.get_entity_by_id(task_id)
        if task is None:
            return None
        for name, value in fields.items():
            setattr(task, name, value)
        await self.db.flush()
        await self.db.refresh(task)
        return _to_result(task)

    async def delete_task(self, task_id: str) -> bool:
        """Delete task; assignments, approval requests and notes go by ON DELETE CASCADE."""
        return await self.delete_by_id(task_id)

    async def list_status_deadlines(self) -> list[tuple[str, datetime | None]]:
        result = await self.db.execute(select(Task.status, Task.deadline))
        return [(status, ensure_utc(deadline)) for status, deadline in result.all()]


class AssignmentRepository:
    """Task-employee assignment repository. Implements IAssignmentRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_for_task(self, task_id: str) -> list[AssigneeResult]:
        return (await _load_assignees(self.db, [task_id])).get(task_id, [])

    async def exists(self, task_id: str, employee_id: str) -> bool:
        result = await self.db.execute(
            select(TaskAssignee.id).where(
                TaskAssignee.task_id == task_id,
                TaskAssignee.employee_id == employee_id,
            )
        )
        return result.scalar_one_or_none() is not None

    async def add(self, task_id: str, employee_id: str) -> bool:
        """Insert in a SAVEPOINT; a duplicate from a concurrent toggle is absorbed."""
        try:
            async with self.db.begin_nested():
                self.db.add(TaskAssignee(task_id=task_id, employee_id=employee_id))
                await self.db.flush()
        except IntegrityError:
            logger.info(
                "Assignment of employee %s to task %s already exists", employee_id, task_id
            )
            return False
        return True

    async def remove(self, task_id: str, employee_id: str) -> bool:
        result = await self.db.execute(
            delete(TaskAssignee).where(
                TaskAssignee.task_id == task_id,
                TaskAssignee.employee_id == employee_id,
            )
        )
        return (result.rowcount or 0) > 0

    async def oldest_employee_id(self, task_id: str) -> str | None:
        result = await self.db.execute(
            select(TaskAssignee.employee_id)
            .where(TaskAssignee.task_id == task_id)
            .order_by(TaskAssignee.created_at, TaskAssignee.id)
            .limit(1)
        )
        return result.scalar_one_or_none()
