"""DTOs for delegated approval requests (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ApprovalRequestResult:
    """Approval request read-model. The raw token is never part of it."""

    id: str
    task_id: str
    requested_by: str
    requested_from: str
    status: str
    message: str | None
    response_note: str | None
    responded_at: datetime | None
    expires_at: datetime
    created_at: datetime
    requested_from_name: str | None = None
    requested_by_name: str | None = None


@dataclass(frozen=True)
class IssuedApproval:
    """Newly issued request plus the one-time shareable link carrying the token."""

    request: ApprovalRequestResult
    token: str
    magic_link: str


@dataclass(frozen=True)
class PublicApprovalView:
    """What an unauthenticated approver sees for a token."""

    request_id: str
    task_id: str
    task_title: str
    task_topic: str | None
    task_description: str | None
    task_priority: str
    task_deadline: datetime | None
    request_status: str
    requested_by_name: str | None
    requested_at: datetime
    expires_at: datetime
    message: str | None


@dataclass(frozen=True)
class ApprovalResponseResult:
    """Outcome of a public response.

    error is one of not_found, expired, already_processed, or
    task_not_approvable when enforced status transitions forbid approving
    the task in its current status.
    """

    success: bool
    error: str | None = None
    message: str | None = None
    approved: bool | None = None
    task_id: str | None = None
