"""Delegated approval protocol: issue, look up, answer and cancel approval links.

A link carries an opaque random token. Only its SHA-256 hash is stored, so a
database read never reveals a usable link. A request is answered at most once:
the pending -> decided transition is a conditional UPDATE, and the losing side
of a race reports already_processed. Expiry is checked lazily when a token is
answered; an expired request is marked expired and the task is left untouched.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import partial

from taskboard.application.dtos.actor import ActorContext
from taskboard.application.dtos.approval import (
    ApprovalRequestResult,
    ApprovalResponseResult,
    IssuedApproval,
    PublicApprovalView,
)
from taskboard.application.interfaces.repositories import (
    IApprovalRequestRepository,
    IEmployeeRepository,
    IProfileRepository,
    ITaskRepository,
)
from taskboard.application.interfaces.services import (
    IAfterCommit,
    IChangePublisher,
    INotificationService,
)
from taskboard.application.services.after_commit import after_commit_or_now
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.application.use_cases.tasks.task_operations import TaskService
from taskboard.core.constants import APPROVAL_LINK_PATH
from taskboard.domain.entities.approval_request import (
    ApprovalWindow,
    decision_status,
    ensure_can_respond,
    is_expired,
)
from taskboard.domain.enums import ApprovalStatus, ChangeTopic
from taskboard.domain.exceptions import (
    ApprovalAlreadyProcessedException,
    ApprovalExpiredException,
    ApprovalNotFoundException,
    ResourceNotFoundException,
    ValidationException,
)
from taskboard.shared.telemetry.tracing import add_span_attributes, traced
from taskboard.shared.utils.datetime import Clock, utc_now
from taskboard.shared.utils.generators import generate_approval_token, hash_token

logger = logging.getLogger(__name__)

# Longer inputs cannot be tokens we issued; reject before hashing.
MAX_TOKEN_LENGTH = 256


class ApprovalService:
    """Issues and consumes single-use approval links for tasks."""

    def __init__(
        self,
        approval_repo: IApprovalRequestRepository,
        task_repo: ITaskRepository,
        employee_repo: IEmployeeRepository,
        profile_repo: IProfileRepository,
        task_service: TaskService,
        notifier: INotificationService | None = None,
        publisher: IChangePublisher | None = None,
        *,
        public_base_url: str,
        ttl_days: int = 7,
        after_commit: IAfterCommit | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.approval_repo = approval_repo
        self.task_repo = task_repo
        self.employee_repo = employee_repo
        self.profile_repo = profile_repo
        self.task_service = task_service
        self.notifier = notifier
        self.publisher = publisher
        self.public_base_url = public_base_url.rstrip("/")
        self.ttl_days = ttl_days
        self.after_commit = after_commit
        self.clock = clock

    def build_magic_link(self, token: str) -> str:
        return f"{self.public_base_url}/{APPROVAL_LINK_PATH}/{token}"

    async def _publish(self, action: str, request: ApprovalRequestResult) -> None:
        if self.publisher is not None:
            await after_commit_or_now(
                self.after_commit,
                partial(
                    self.publisher.publish,
                    ChangeTopic.APPROVALS,
                    action,
                    {"request_id": request.id, "task_id": request.task_id},
                ),
            )

    async def _find_by_token(self, token: str) -> ApprovalRequestResult:
        if not token or len(token) > MAX_TOKEN_LENGTH:
            raise ApprovalNotFoundException()
        request = await self.approval_repo.get_by_token_hash(hash_token(token))
        if request is None:
            raise ApprovalNotFoundException()
        return request

    async def issue_request(
        self,
        actor: ActorContext,
        task_id: str,
        requested_from: str,
        message: str | None = None,
    ) -> IssuedApproval:
        """Create a pending request and return it with its one-time link.

        Earlier pending requests for the same task are expired first, so a task
        has at most one live link.
        """
        AuthorizationService.require_capability(actor, "can_edit_tasks")
        task = await self.task_repo.get_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException("task", task_id)
        employee = await self.employee_repo.get_by_id(requested_from)
        if employee is None:
            raise ResourceNotFoundException("employee", requested_from)

        now = self.clock()
        superseded = await self.approval_repo.expire_pending_for_task(task_id, now)
        if superseded:
            logger.info(
                "Expired %s earlier pending approval request(s) for task %s",
                superseded,
                task_id,
            )

        token = generate_approval_token()
        window = ApprovalWindow.starting(now, self.ttl_days)
        request = await self.approval_repo.create_request(
            task_id=task_id,
            token_hash=hash_token(token),
            requested_by=actor.user_id,
            requested_from=employee.id,
            message=message,
            created_at=window.created_at,
            expires_at=window.expires_at,
        )
        magic_link = self.build_magic_link(token)
        logger.info(
            "Approval request %s for task %s issued by %s to employee %s",
            request.id,
            task_id,
            actor.user_id,
            employee.id,
        )
        if self.notifier is not None:
            # A rolled-back request must not have its link delivered.
            await after_commit_or_now(
                self.after_commit,
                partial(
                    self.notifier.notify_approval_requested,
                    employee,
                    task.title,
                    magic_link,
                    message,
                ),
            )
        await self._publish("requested", request)
        return IssuedApproval(
            request=replace(request, requested_from_name=employee.name),
            token=token,
            magic_link=magic_link,
        )

    async def lookup_by_token(self, token: str) -> PublicApprovalView:
        """Return the public view of a token's request.

        Unknown and malformed tokens both raise ApprovalNotFoundException. A
        pending request past its expiry is shown as expired (nothing is written).
        """
        request = await self._find_by_token(token)
        task = await self.task_repo.get_by_id(request.task_id)
        if task is None:
            raise ApprovalNotFoundException()
        requested_by_name = await self.profile_repo.get_display_name(
            request.requested_by
        )
        status = request.status
        if status == ApprovalStatus.PENDING.value and is_expired(
            request.expires_at, self.clock()
        ):
            status = ApprovalStatus.EXPIRED.value
        return PublicApprovalView(
            request_id=request.id,
            task_id=task.id,
            task_title=task.title,
            task_topic=task.topic,
            task_description=task.description,
            task_priority=task.priority,
            task_deadline=task.deadline,
            request_status=status,
            requested_by_name=requested_by_name,
            requested_at=request.created_at,
            expires_at=request.expires_at,
            message=request.message,
        )

    async def consume(
        self, token: str, approved: bool, note: str | None = None
    ) -> ApprovalRequestResult:
        """Answer the request behind token; approve the task when approved.

        Raises ApprovalNotFoundException, ApprovalExpiredException,
        ApprovalAlreadyProcessedException, or ValidationException when the
        task may not be approved from its current status. The request update
        and the task approval share the caller's transaction.
        """
        request = await self._find_by_token(token)
        now = self.clock()
        status = ApprovalStatus(request.status)

        if status == ApprovalStatus.PENDING and is_expired(request.expires_at, now):
            await self.approval_repo.transition_if_pending(
                request.id, ApprovalStatus.EXPIRED.value, now
            )
            logger.info("Approval request %s expired before it was answered", request.id)
        ensure_can_respond(request.id, status, request.expires_at, now)

        if approved:
            # Checked before the request is marked so a refusal leaves it pending.
            await self.task_service.ensure_approvable(request.task_id)
        target = decision_status(approved)
        updated = await self.approval_repo.transition_if_pending(
            request.id, target.value, now, response_note=note
        )
        if updated is None:
            current = await self.approval_repo.get_by_id(request.id)
            raise ApprovalAlreadyProcessedException(
                request.id, current.status if current else "unknown"
            )

        if approved:
            await self.task_service.approve_by_delegate(
                request.task_id, request.requested_from
            )
        logger.info(
            "Approval request %s answered: %s", request.id, target.value
        )
        await self._publish("responded", updated)
        return updated

    @traced("approvals.respond")
    async def respond(
        self, token: str, approved: bool, note: str | None = None
    ) -> ApprovalResponseResult:
        """Public response contract: expected failures come back as success=False."""
        try:
            request = await self.consume(token, approved, note)
        except ApprovalNotFoundException as e:
            outcome = ApprovalResponseResult(
                success=False, error="not_found", message=e.message
            )
        except ApprovalExpiredException as e:
            outcome = ApprovalResponseResult(
                success=False, error="expired", message=e.message
            )
        except ApprovalAlreadyProcessedException as e:
            outcome = ApprovalResponseResult(
                success=False, error="already_processed", message=e.message
            )
        except ValidationException as e:
            outcome = ApprovalResponseResult(
                success=False, error="task_not_approvable", message=e.message
            )
        else:
            outcome = ApprovalResponseResult(
                success=True, approved=approved, task_id=request.task_id
            )
        add_span_attributes(success=outcome.success, error=outcome.error or "")
        return outcome

    async def cancel_request(
        self, actor: ActorContext, request_id: str
    ) -> ApprovalRequestResult:
        """Mark the request expired whatever its state. Requester or can_edit_tasks only."""
        request = await self.approval_repo.get_by_id(request_id)
        if request is None:
            raise ResourceNotFoundException("approval_request", request_id)
        if request.requested_by != actor.user_id:
            AuthorizationService.require_capability(actor, "can_edit_tasks")
        updated = await self.approval_repo.force_expire(request_id, self.clock())
        if updated is None:
            raise ResourceNotFoundException("approval_request", request_id)
        logger.info("Approval request %s cancelled by %s", request_id, actor.user_id)
        await self._publish("cancelled", updated)
        return updated

    async def list_for_task(
        self, actor: ActorContext, task_id: str
    ) -> list[ApprovalRequestResult]:
        """All requests of the task, newest first."""
        AuthorizationService.require_capability(actor, "can_view_tasks")
        if await self.task_repo.get_by_id(task_id) is None:
            raise ResourceNotFoundException("task", task_id)
        return await self.approval_repo.list_for_task(task_id)
