"""Application DTOs (no ORM dependency)."""

from taskboard.application.dtos.actor import ActorContext
from taskboard.application.dtos.approval import (
    ApprovalRequestResult,
    ApprovalResponseResult,
    IssuedApproval,
    PublicApprovalView,
)
from taskboard.application.dtos.bulk import BulkApproveResult, BulkItemResult
from taskboard.application.dtos.employee import EmployeeResult
from taskboard.application.dtos.note import TaskNoteResult
from taskboard.application.dtos.permission import (
    PermissionOverrideResult,
    RolePermissions,
)
from taskboard.application.dtos.task import (
    AssigneeResult,
    TaskResult,
    ToggleAssigneeResult,
)
from taskboard.application.dtos.user import InvitedUser, InviteResult

__all__ = [
    "ActorContext",
    "ApprovalRequestResult",
    "ApprovalResponseResult",
    "AssigneeResult",
    "BulkApproveResult",
    "BulkItemResult",
    "EmployeeResult",
    "InviteResult",
    "InvitedUser",
    "IssuedApproval",
    "PermissionOverrideResult",
    "PublicApprovalView",
    "RolePermissions",
    "TaskNoteResult",
    "TaskResult",
    "ToggleAssigneeResult",
]
