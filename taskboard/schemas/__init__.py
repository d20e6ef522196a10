"""Pydantic request/response schemas for the API."""

from taskboard.schemas.approval import (
    ApprovalRequestCreate,
    ApprovalRequestResponse,
    ApprovalRespondRequest,
    ApprovalRespondResponse,
    IssuedApprovalResponse,
    PublicApprovalResponse,
)
from taskboard.schemas.employee import EmployeeResponse
from taskboard.schemas.health import HealthResponse
from taskboard.schemas.note import TaskNoteCreate, TaskNoteResponse
from taskboard.schemas.permission import (
    MyPermissionsResponse,
    PermissionOverrideUpdate,
    RolePermissionsResponse,
)
from taskboard.schemas.task import (
    BulkApproveRequest,
    BulkApproveResponse,
    TaskCreateRequest,
    TaskResponse,
    TaskStatsResponse,
    TaskUpdateRequest,
)
from taskboard.schemas.user import InviteUserRequest, InviteUserResponse

__all__ = [
    "ApprovalRequestCreate",
    "ApprovalRequestResponse",
    "ApprovalRespondRequest",
    "ApprovalRespondResponse",
    "BulkApproveRequest",
    "BulkApproveResponse",
    "EmployeeResponse",
    "HealthResponse",
    "InviteUserRequest",
    "InviteUserResponse",
    "IssuedApprovalResponse",
    "MyPermissionsResponse",
    "PermissionOverrideUpdate",
    "PublicApprovalResponse",
    "RolePermissionsResponse",
    "TaskCreateRequest",
    "TaskNoteCreate",
    "TaskNoteResponse",
    "TaskResponse",
    "TaskStatsResponse",
    "TaskUpdateRequest",
]
