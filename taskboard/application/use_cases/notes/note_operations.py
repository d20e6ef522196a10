"""Task note operations: add, list, delete."""

from __future__ import annotations

import logging

from taskboard.application.dtos.actor import ActorContext
from taskboard.application.dtos.note import TaskNoteResult
from taskboard.application.interfaces.repositories import (
    ITaskNoteRepository,
    ITaskRepository,
)
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.domain.exceptions import ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)


class TaskNoteService:
    """Free-text notes on a task, listed newest first."""

    def __init__(
        self, note_repo: ITaskNoteRepository, task_repo: ITaskRepository
    ) -> None:
        self.note_repo = note_repo
        self.task_repo = task_repo

    async def _require_task(self, task_id: str) -> None:
        if await self.task_repo.get_by_id(task_id) is None:
            raise ResourceNotFoundException("task", task_id)

    async def add_note(
        self, actor: ActorContext, task_id: str, content: str
    ) -> TaskNoteResult:
        AuthorizationService.require_capability(actor, "can_edit_tasks")
        if content is None or not content.strip():
            raise ValidationException("Note content is required", field="content")
        await self._require_task(task_id)
        return await self.note_repo.create_note(
            task_id=task_id, content=content.strip(), created_by=actor.user_id
        )

    async def list_notes(
        self, actor: ActorContext, task_id: str
    ) -> list[TaskNoteResult]:
        AuthorizationService.require_capability(actor, "can_view_tasks")
        await self._require_task(task_id)
        return await self.note_repo.list_for_task(task_id)

    async def delete_note(self, actor: ActorContext, task_id: str, note_id: str) -> None:
        """Delete a note; it must belong to task_id."""
        AuthorizationService.require_capability(actor, "can_edit_tasks")
        note = await self.note_repo.get_by_id(note_id)
        if note is None or note.task_id != task_id:
            raise ResourceNotFoundException("task_note", note_id)
        await self.note_repo.delete_note(note_id)
        logger.info("Note %s on task %s deleted by %s", note_id, task_id, actor.user_id)
