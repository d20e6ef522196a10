"""Approval request API schemas (authenticated and public)."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ApprovalRequestCreate(BaseModel):
    """Body for POST /tasks/{id}/approval-requests."""

    requested_from: str = Field(..., min_length=1, description="Employee id of the approver")
    message: str | None = Field(default=None, max_length=2000)


class ApprovalRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class IssuedApprovalResponse(BaseModel):
    """Newly issued request. magic_link carries the one-time token and is shown once."""

    request: ApprovalRequestResponse
    magic_link: str


class PublicApprovalResponse(BaseModel):
    """Public-safe view of a request, looked up by its token."""

    model_config = ConfigDict(from_attributes=True)

    request_id: str
    task_id: str
    task_title: str
    task_topic: str | None = None
    task_description: str | None = None
    task_priority: str
    task_deadline: datetime | None = None
    request_status: str
    requested_by_name: str | None
    requested_at: datetime
    expires_at: datetime
    message: str | None = None


class ApprovalRespondRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=256)
    approved: bool
    note: str | None = Field(default=None, max_length=2000)


RespondError = Literal[
    "not_found", "expired", "already_processed", "task_not_approvable"
]


class ApprovalRespondResponse(BaseModel):
    """success=false carries one of the RespondError codes in error."""

    model_config = ConfigDict(from_attributes=True)

    success: bool
    error: RespondError | None = None
    message: str | None = None
    approved: bool | None = None
    task_id: str | None = None
