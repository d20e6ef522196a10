"""Domain enumerations for the Taskboard application.

Values are persisted as-is and shared with clients; they must not change.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TaskStatus(_ValuesMixin, str, Enum):
    """Task lifecycle status. New tasks start in NEW."""

    NEW = "new"
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    PARTIALLY_DONE = "partially_done"
    STUCK = "stuck"
    DONE = "done"


class TaskPriority(_ValuesMixin, str, Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ApprovalStatus(_ValuesMixin, str, Enum):
    """Delegated approval request status. Only PENDING is non-terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"


class RoleName(_ValuesMixin, str, Enum):
    """Access-control role. Distinct from an employee's free-text display role."""

    CEO = "ceo"
    ADMIN = "admin"
    MANAGER = "manager"
    EDITOR = "editor"
    TEAM_MEMBER = "team_member"
    VIEWER = "viewer"

    @classmethod
    def parse(cls, value: str | None) -> "RoleName | None":
        """Return the role for value, or None if value is empty or unknown."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


# Highest first; used when a user holds several roles.
ROLE_PRECEDENCE: tuple[RoleName, ...] = (
    RoleName.CEO,
    RoleName.ADMIN,
    RoleName.MANAGER,
    RoleName.EDITOR,
    RoleName.TEAM_MEMBER,
    RoleName.VIEWER,
)


class ChangeTopic(_ValuesMixin, str, Enum):
    """Topic of a change notification published after a successful write."""

    TASKS = "tasks"
    ASSIGNMENTS = "assignments"
    APPROVALS = "approvals"
