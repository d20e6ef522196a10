"""User invitation, forwarded to the provisioning collaborator."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from taskboard.api.v1.dependencies import (
    get_bearer_token,
    get_current_actor,
    get_invite_user_use_case,
)
from taskboard.application.dtos.actor import ActorContext
from taskboard.application.use_cases.users import InviteUserUseCase
from taskboard.core.limiter import limit_invite
from taskboard.schemas.user import InviteUserRequest, InviteUserResponse

router = APIRouter()


@router.post("/invite", response_model=InviteUserResponse, status_code=201)
@limit_invite
async def invite_user(
    request: Request,
    body: InviteUserRequest,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    token: Annotated[str, Depends(get_bearer_token)],
    use_case: Annotated[InviteUserUseCase, Depends(get_invite_user_use_case)],
):
    """Invite a user. The caller's bearer token is forwarded so the collaborator can check it too."""
    result = await use_case.execute(
        actor,
        email=str(body.email),
        full_name=body.full_name,
        role=body.role,
        bearer_token=token,
    )
    return InviteUserResponse.model_validate(result)
