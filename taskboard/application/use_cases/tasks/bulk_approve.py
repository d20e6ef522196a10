"""Bulk approve: apply Approve to many tasks with independent per-item outcomes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager

from taskboard.application.dtos.actor import ActorContext
from taskboard.application.dtos.bulk import BulkApproveResult, BulkItemResult
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.application.use_cases.tasks.task_operations import TaskService
from taskboard.domain.exceptions import TaskboardException
from taskboard.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

# Yields a TaskService bound to its own session; commits on clean exit, rolls back on error.
TaskServiceFactory = Callable[[], AbstractAsyncContextManager[TaskService]]


class BulkApproveUseCase:
    """Approve each task in its own transaction, concurrently.

    A failing item never affects the others and successful items are not
    rolled back. The aggregate is returned once every attempt has settled.
    """

    def __init__(
        self,
        service_factory: TaskServiceFactory,
        max_concurrency: int = 10,
    ) -> None:
        self.service_factory = service_factory
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def _approve_one(self, actor: ActorContext, task_id: str) -> BulkItemResult:
        async with self._semaphore:
            try:
                async with self.service_factory() as service:
                    await service.approve_task(actor, task_id)
            except TaskboardException as e:
                logger.warning(
                    "Bulk approve: task %s failed: %s (%s)",
                    task_id,
                    e.message,
                    e.error_code,
                )
                return BulkItemResult(
                    task_id=task_id,
                    success=False,
                    error=e.message,
                    error_code=e.error_code,
                )
            except Exception:
                logger.exception("Bulk approve: task %s failed unexpectedly", task_id)
                return BulkItemResult(
                    task_id=task_id,
                    success=False,
                    error="Internal error",
                    error_code="INTERNAL_ERROR",
                )
        return BulkItemResult(task_id=task_id, success=True)

    @traced("tasks.bulk_approve")
    async def execute(
        self, actor: ActorContext, task_ids: Sequence[str]
    ) -> BulkApproveResult:
        """Approve every task id (duplicates collapsed, order kept)."""
        AuthorizationService.require_capability(actor, "can_edit_tasks")
        unique_ids = list(dict.fromkeys(task_ids))
        add_span_attributes(task_count=len(unique_ids))

        results = await asyncio.gather(
            *(self._approve_one(actor, task_id) for task_id in unique_ids)
        )
        succeeded = sum(1 for r in results if r.success)
        logger.info(
            "Bulk approve by %s: %s succeeded, %s failed",
            actor.user_id,
            succeeded,
            len(results) - succeeded,
        )
        return BulkApproveResult(
            succeeded=succeeded,
            failed=len(results) - succeeded,
            results=tuple(results),
        )
