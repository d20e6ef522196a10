"""Task use cases."""

from taskboard.application.use_cases.tasks.bulk_approve import (
    BulkApproveUseCase,
    TaskServiceFactory,
)
from taskboard.application.use_cases.tasks.task_operations import TaskService

__all__ = ["BulkApproveUseCase", "TaskService", "TaskServiceFactory"]
