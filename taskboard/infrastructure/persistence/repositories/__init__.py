"""Repository implementations (SQLAlchemy). Each implements an application port."""

from taskboard.infrastructure.persistence.repositories.approval_request_repo import (
    ApprovalRequestRepository,
)
from taskboard.infrastructure.persistence.repositories.base import BaseRepository
from taskboard.infrastructure.persistence.repositories.employee_repo import (
    EmployeeRepository,
    ProfileRepository,
)
from taskboard.infrastructure.persistence.repositories.permission_repo import (
    PermissionOverrideRepository,
    UserRoleRepository,
)
from taskboard.infrastructure.persistence.repositories.task_note_repo import (
    TaskNoteRepository,
)
from taskboard.infrastructure.persistence.repositories.task_repo import (
    AssignmentRepository,
    TaskRepository,
)

__all__ = [
    "ApprovalRequestRepository",
    "AssignmentRepository",
    "BaseRepository",
    "EmployeeRepository",
    "PermissionOverrideRepository",
    "ProfileRepository",
    "TaskNoteRepository",
    "TaskRepository",
    "UserRoleRepository",
]
