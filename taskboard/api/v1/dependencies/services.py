"""Use-case dependencies (composition root).

Routes depend only on these builders, never on repositories directly. Read
routes get a plain session (get_db); write routes get a transactional one
(get_db_transactional), so each request is one database transaction. Change
events, approval links and cache invalidation are queued on the session
and only run once that transaction has committed.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.application.services.permission_settings_service import (
    PermissionSettingsService,
)
from taskboard.application.use_cases.approvals import ApprovalService
from taskboard.application.use_cases.employees import EmployeeService
from taskboard.application.use_cases.notes import TaskNoteService
from taskboard.application.use_cases.tasks import BulkApproveUseCase, TaskService
from taskboard.application.use_cases.users import InviteUserUseCase
from taskboard.core.config import get_settings
from taskboard.infrastructure.external.provisioning.http_client import (
    HttpProvisioningClient,
)
from taskboard.infrastructure.messaging.redis_pubsub import get_change_publisher
from taskboard.infrastructure.persistence.database import (
    after_commit,
    get_db,
    get_db_transactional,
    session_scope,
)
from taskboard.infrastructure.persistence.repositories import (
    ApprovalRequestRepository,
    AssignmentRepository,
    EmployeeRepository,
    PermissionOverrideRepository,
    ProfileRepository,
    TaskNoteRepository,
    TaskRepository,
)
from taskboard.infrastructure.services.notification_service import (
    LogOnlyNotificationService,
)

from .auth import get_authorization_service


def build_task_service(db: AsyncSession) -> TaskService:
    """TaskService over one session, with the global change publisher."""
    return TaskService(
        task_repo=TaskRepository(db),
        assignment_repo=AssignmentRepository(db),
        employee_repo=EmployeeRepository(db),
        publisher=get_change_publisher(),
        enforce_transitions=get_settings().enforce_status_transitions,
        after_commit=after_commit(db),
    )


def build_approval_service(db: AsyncSession) -> ApprovalService:
    """ApprovalService whose task approval shares the request's session."""
    settings = get_settings()
    return ApprovalService(
        approval_repo=ApprovalRequestRepository(db),
        task_repo=TaskRepository(db),
        employee_repo=EmployeeRepository(db),
        profile_repo=ProfileRepository(db),
        task_service=build_task_service(db),
        notifier=LogOnlyNotificationService(),
        publisher=get_change_publisher(),
        public_base_url=settings.public_base_url,
        ttl_days=settings.approval_request_ttl_days,
        after_commit=after_commit(db),
    )


async def get_task_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TaskService:
    """TaskService for read operations."""
    return build_task_service(db)


async def get_task_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TaskService:
    """TaskService for create/update/delete (transactional)."""
    return build_task_service(db)


@asynccontextmanager
async def _scoped_task_service() -> AsyncIterator[TaskService]:
    async with session_scope() as session:
        yield build_task_service(session)


def get_bulk_approve_use_case() -> BulkApproveUseCase:
    """Bulk approve with one session (and transaction) per item."""
    return BulkApproveUseCase(service_factory=_scoped_task_service)


async def get_approval_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApprovalService:
    """ApprovalService for read operations (list, public lookup)."""
    return build_approval_service(db)


async def get_approval_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ApprovalService:
    """ApprovalService for issue, respond and cancel (transactional)."""
    return build_approval_service(db)


async def get_note_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TaskNoteService:
    return TaskNoteService(TaskNoteRepository(db), TaskRepository(db))


async def get_note_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TaskNoteService:
    return TaskNoteService(TaskNoteRepository(db), TaskRepository(db))


async def get_employee_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EmployeeService:
    return EmployeeService(EmployeeRepository(db))


async def get_permission_settings_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    authorization: Annotated[
        AuthorizationService, Depends(get_authorization_service)
    ],
) -> PermissionSettingsService:
    """Override management; writes go through the request transaction."""
    return PermissionSettingsService(
        overrides=PermissionOverrideRepository(db),
        authorization=authorization,
        after_commit=after_commit(db),
    )


def get_invite_user_use_case(request: Request) -> InviteUserUseCase:
    """Invite use case over the shared HTTP client (set in lifespan) when present."""
    settings = get_settings()
    client = HttpProvisioningClient(
        settings.provisioning_url,
        timeout=settings.provisioning_timeout_seconds,
        http_client=getattr(request.app.state, "http_client", None),
    )
    return InviteUserUseCase(client)
