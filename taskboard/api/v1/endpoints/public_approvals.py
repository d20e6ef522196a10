"""Public approval link endpoints (no authentication; the token is the credential).

Rate-limited per client address. Unknown and malformed tokens look the same.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from taskboard.api.v1.dependencies import (
    get_approval_service,
    get_approval_service_for_write,
)
from taskboard.application.use_cases.approvals import ApprovalService
from taskboard.core.limiter import limit_public_lookup, limit_public_respond
from taskboard.schemas.approval import (
    ApprovalRespondRequest,
    ApprovalRespondResponse,
    PublicApprovalResponse,
)

router = APIRouter()


@router.post("/respond", response_model=ApprovalRespondResponse)
@limit_public_respond
async def respond_to_approval(
    request: Request,
    body: ApprovalRespondRequest,
    approval_svc: Annotated[ApprovalService, Depends(get_approval_service_for_write)],
):
    """Approve or reject through a link. Expected failures return success=false."""
    result = await approval_svc.respond(body.token, body.approved, body.note)
    return ApprovalRespondResponse.model_validate(result)


@router.get("/{token}", response_model=PublicApprovalResponse)
@limit_public_lookup
async def lookup_approval(
    request: Request,
    token: str,
    approval_svc: Annotated[ApprovalService, Depends(get_approval_service)],
):
    """Public-safe view of the request behind a link; 404 for any unknown token."""
    view = await approval_svc.lookup_by_token(token)
    return PublicApprovalResponse.model_validate(view)
