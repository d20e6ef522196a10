"""Task and approval-request domain rules, enums."""

from datetime import datetime, timedelta, timezone

import pytest

from taskboard.domain.entities.approval_request import (
    ApprovalWindow,
    decision_status,
    ensure_can_respond,
    is_expired,
)
from taskboard.domain.entities.task import (
    TaskStats,
    is_transition_allowed,
    validate_status_transition,
    validate_title,
)
from taskboard.domain.enums import ApprovalStatus, RoleName, TaskPriority, TaskStatus
from taskboard.domain.exceptions import (
    ApprovalAlreadyProcessedException,
    ApprovalExpiredException,
    ValidationException,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_enum_values_are_stable() -> None:
    assert TaskStatus.values() == [
        "new",
        "approved",
        "in_progress",
        "partially_done",
        "stuck",
        "done",
    ]
    assert TaskPriority.values() == ["low", "medium", "high", "urgent"]
    assert ApprovalStatus.values() == ["pending", "approved", "rejected", "expired"]


def test_role_parse() -> None:
    assert RoleName.parse("manager") is RoleName.MANAGER
    assert RoleName.parse("MANAGER") is None
    assert RoleName.parse("") is None
    assert RoleName.parse(None) is None


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        (TaskStatus.NEW, TaskStatus.APPROVED, True),
        (TaskStatus.NEW, TaskStatus.DONE, False),
        (TaskStatus.APPROVED, TaskStatus.NEW, True),
        (TaskStatus.IN_PROGRESS, TaskStatus.STUCK, True),
        (TaskStatus.STUCK, TaskStatus.APPROVED, False),
        (TaskStatus.DONE, TaskStatus.IN_PROGRESS, True),
        (TaskStatus.DONE, TaskStatus.DONE, True),
    ],
)
def test_transition_table(current, target, allowed) -> None:
    assert is_transition_allowed(current, target) is allowed


def test_validate_status_transition_raises_with_field() -> None:
    with pytest.raises(ValidationException) as exc_info:
        validate_status_transition(TaskStatus.NEW, TaskStatus.DONE)
    assert exc_info.value.details["field"] == "status"


def test_validate_title_strips_and_rejects_blank() -> None:
    assert validate_title("  Q1 budget review ") == "Q1 budget review"
    with pytest.raises(ValidationException):
        validate_title("   ")
    with pytest.raises(ValidationException):
        validate_title(None)


def test_stats_from_rows() -> None:
    past = NOW - timedelta(days=1)
    future = NOW + timedelta(days=1)
    rows = [
        ("new", None),
        ("new", past),
        ("approved", future),
        ("in_progress", past),
        ("stuck", past),
        ("done", past),
        ("partially_done", None),
    ]
    stats = TaskStats.from_rows(rows, NOW)
    assert stats.open == 4
    assert stats.pending_approval == 2
    assert stats.completed == 1
    # done tasks are never overdue
    assert stats.overdue == 3


def test_stats_empty() -> None:
    assert TaskStats.from_rows([], NOW) == TaskStats(0, 0, 0, 0)


def test_approval_window_and_expiry_boundary() -> None:
    window = ApprovalWindow.starting(NOW, 7)
    assert window.expires_at == NOW + timedelta(days=7)
    assert is_expired(window.expires_at, window.expires_at) is False
    assert is_expired(window.expires_at, window.expires_at + timedelta(seconds=1))


def test_ensure_can_respond_checks_status_before_time() -> None:
    late = NOW + timedelta(days=30)
    with pytest.raises(ApprovalAlreadyProcessedException):
        ensure_can_respond("r1", ApprovalStatus.APPROVED, NOW, late)
    with pytest.raises(ApprovalExpiredException):
        ensure_can_respond("r1", ApprovalStatus.PENDING, NOW, late)
    ensure_can_respond("r1", ApprovalStatus.PENDING, NOW, NOW)


def test_decision_status() -> None:
    assert decision_status(True) is ApprovalStatus.APPROVED
    assert decision_status(False) is ApprovalStatus.REJECTED
