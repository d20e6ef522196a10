"""Approval request repository. State changes are conditional UPDATEs (compare-and-set)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.dtos.approval import ApprovalRequestResult
from taskboard.domain.enums import ApprovalStatus
from taskboard.infrastructure.persistence.models.approval_request import (
    TaskApprovalRequest,
)
from taskboard.infrastructure.persistence.models.employee import Employee, Profile
from taskboard.infrastructure.persistence.repositories.base import BaseRepository
from taskboard.shared.utils.datetime import ensure_utc

_PENDING = ApprovalStatus.PENDING.value
_EXPIRED = ApprovalStatus.EXPIRED.value


def _to_result(
    r: TaskApprovalRequest,
    requested_from_name: str | None = None,
    requested_by_name: str | None = None,
) -> ApprovalRequestResult:
    """Map TaskApprovalRequest ORM to ApprovalRequestResult DTO."""
    return ApprovalRequestResult(
        id=r.id,
        task_id=r.task_id,
        requested_by=r.requested_by,
        requested_from=r.requested_from,
        status=r.status,
        message=r.message,
        response_note=r.response_note,
        responded_at=ensure_utc(r.responded_at),
        expires_at=ensure_utc(r.expires_at),
        created_at=ensure_utc(r.created_at),
        requested_from_name=requested_from_name,
        requested_by_name=requested_by_name,
    )


class ApprovalRequestRepository(BaseRepository[TaskApprovalRequest]):
    """Approval request repository. Implements IApprovalRequestRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TaskApprovalRequest)

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
        row = await self.create(
            TaskApprovalRequest(
                task_id=task_id,
                token_hash=token_hash,
                requested_by=requested_by,
                requested_from=requested_from,
                status=_PENDING,
                message=message,
                created_at=created_at,
                expires_at=expires_at,
            )
        )
        return _to_result(row)

    async def get_by_id(self, request_id: str) -> ApprovalRequestResult | None:
        row = await self.get_entity_by_id(request_id)
        return _to_result(row) if row else None

    async def get_by_token_hash(self, token_hash: str) -> ApprovalRequestResult | None:
        result = await self.db.execute(
            select(TaskApprovalRequest)
            .where(TaskApprovalRequest.token_hash == token_hash)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def list_for_task(self, task_id: str) -> list[ApprovalRequestResult]:
        """Newest first, with the approver's name and the requester's display name."""
        result = await self.db.execute(
            select(TaskApprovalRequest, Employee.name, Profile.full_name)
            .join(
                Employee,
                Employee.id == TaskApprovalRequest.requested_from,
                isouter=True,
            )
            .join(
                Profile,
                Profile.id == TaskApprovalRequest.requested_by,
                isouter=True,
            )
            .where(TaskApprovalRequest.task_id == task_id)
            .order_by(
                TaskApprovalRequest.created_at.desc(), TaskApprovalRequest.id.desc()
            )
        )
        return [
            _to_result(row, requested_from_name=name, requested_by_name=full_name)
            for row, name, full_name in result.all()
        ]

    async def _update_returning_id(self, stmt: Any) -> ApprovalRequestResult | None:
        updated_id = (
            await self.db.execute(
                stmt.returning(TaskApprovalRequest.id).execution_options(
                    synchronize_session=False
                )
            )
        ).scalar_one_or_none()
        if updated_id is None:
            return None
        return await self.get_by_id(updated_id)

    async def transition_if_pending(
        self,
        request_id: str,
        status: str,
        now: datetime,
        response_note: str | None = None,
    ) -> ApprovalRequestResult | None:
        """UPDATE ... WHERE status = 'pending' RETURNING id. None means another writer won."""
        values: dict[str, Any] = {"status": status, "responded_at": now}
        if response_note is not None:
            values["response_note"] = response_note
        return await self._update_returning_id(
            update(TaskApprovalRequest)
            .where(
                TaskApprovalRequest.id == request_id,
                TaskApprovalRequest.status == _PENDING,
            )
            .values(**values)
        )

    async def expire_pending_for_task(self, task_id: str, now: datetime) -> int:
        result = await self.db.execute(
            update(TaskApprovalRequest)
            .where(
                TaskApprovalRequest.task_id == task_id,
                TaskApprovalRequest.status == _PENDING,
            )
            .values(status=_EXPIRED, responded_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def force_expire(
        self, request_id: str, now: datetime
    ) -> ApprovalRequestResult | None:
        """Set expired regardless of state; responded_at keeps an earlier answer time."""
        return await self._update_returning_id(
            update(TaskApprovalRequest)
            .where(TaskApprovalRequest.id == request_id)
            .values(
                status=_EXPIRED,
                responded_at=func.coalesce(TaskApprovalRequest.responded_at, now),
            )
        )
