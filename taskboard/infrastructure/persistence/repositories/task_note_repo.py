"""Task note repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.dtos.note import TaskNoteResult
from taskboard.infrastructure.persistence.models.task import TaskNote
from taskboard.infrastructure.persistence.repositories.base import BaseRepository
from taskboard.shared.utils.datetime import ensure_utc


def _to_result(n: TaskNote) -> TaskNoteResult:
    return TaskNoteResult(
        id=n.id,
        task_id=n.task_id,
        content=n.content,
        created_by=n.created_by,
        created_at=ensure_utc(n.created_at),
    )


class TaskNoteRepository(BaseRepository[TaskNote]):
    """Task note repository. Implements ITaskNoteRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TaskNote)

    async def create_note(
        self, *, task_id: str, content: str, created_by: str | None
    ) -> TaskNoteResult:
        note = await self.create(
            TaskNote(task_id=task_id, content=content, created_by=created_by)
        )
        return _to_result(note)

    async def list_for_task(self, task_id: str) -> list[TaskNoteResult]:
        result = await self.db.execute(
            select(TaskNote)
            .where(TaskNote.task_id == task_id)
            .order_by(TaskNote.created_at.desc(), TaskNote.id.desc())
        )
        return [_to_result(n) for n in result.scalars().all()]

    async def get_by_id(self, note_id: str) -> TaskNoteResult | None:
        note = await self.get_entity_by_id(note_id)
        return _to_result(note) if note else None

    async def delete_note(self, note_id: str) -> bool:
        return await self.delete_by_id(note_id)
