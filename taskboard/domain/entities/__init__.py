"""Domain entities and business rules (no persistence dependencies)."""

from taskboard.domain.entities.approval_request import (
    ApprovalWindow,
    decision_status,
    ensure_can_respond,
    is_expired,
)
from taskboard.domain.entities.task import (
    ALLOWED_TRANSITIONS,
    TaskStats,
    is_transition_allowed,
    validate_status_transition,
    validate_title,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "ApprovalWindow",
    "TaskStats",
    "decision_status",
    "ensure_can_respond",
    "is_expired",
    "is_transition_allowed",
    "validate_status_transition",
    "validate_title",
]
