"""Approval request domain rules.

An approval request is answered at most once. PENDING is the only state that
accepts a response; APPROVED, REJECTED and EXPIRED are terminal. Time expiry is
evaluated lazily when the request is read or answered.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from taskboard.domain.enums import ApprovalStatus
from taskboard.domain.exceptions import (
    ApprovalAlreadyProcessedException,
    ApprovalExpiredException,
)


@dataclass(frozen=True)
class ApprovalWindow:
    """Validity window of an approval link."""

    created_at: datetime
    expires_at: datetime

    @classmethod
    def starting(cls, now: datetime, ttl_days: int) -> "ApprovalWindow":
        return cls(created_at=now, expires_at=now + timedelta(days=ttl_days))


def is_expired(expires_at: datetime, now: datetime) -> bool:
    """Return True once now is strictly past expires_at."""
    return now > expires_at


def ensure_can_respond(
    request_id: str,
    status: ApprovalStatus,
    expires_at: datetime,
    now: datetime,
) -> None:
    """Raise if the request can no longer be answered.

    Status is checked before time: an answered request reports
    already-processed even after its window closes.
    """
    if status != ApprovalStatus.PENDING:
        raise ApprovalAlreadyProcessedException(request_id, status.value)
    if is_expired(expires_at, now):
        raise ApprovalExpiredException(request_id)


def decision_status(approved: bool) -> ApprovalStatus:
    """Map a yes/no response to the terminal status it produces."""
    return ApprovalStatus.APPROVED if approved else ApprovalStatus.REJECTED
