"""Authenticated approval-request actions (cancel)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from taskboard.api.v1.dependencies import (
    get_approval_service_for_write,
    get_current_actor,
)
from taskboard.application.dtos.actor import ActorContext
from taskboard.application.use_cases.approvals import ApprovalService
from taskboard.core.limiter import limit_writes
from taskboard.schemas.approval import ApprovalRequestResponse

router = APIRouter()


@router.post("/{request_id}/cancel", response_model=ApprovalRequestResponse)
@limit_writes
async def cancel_approval_request(
    request: Request,
    request_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    approval_svc: Annotated[ApprovalService, Depends(get_approval_service_for_write)],
):
    """Expire the request so its link stops working. Requester or can_edit_tasks."""
    cancelled = await approval_svc.cancel_request(actor, request_id)
    return ApprovalRequestResponse.model_validate(cancelled)
