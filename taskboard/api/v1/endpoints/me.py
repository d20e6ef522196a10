"""Endpoints about the calling user."""

from typing import Annotated

from fastapi import APIRouter, Depends

from taskboard.api.v1.dependencies import get_current_actor
from taskboard.application.dtos.actor import ActorContext
from taskboard.schemas.permission import MyPermissionsResponse

router = APIRouter()


@router.get("/permissions", response_model=MyPermissionsResponse)
async def get_my_permissions(
    actor: Annotated[ActorContext, Depends(get_current_actor)],
):
    """Caller's resolved role and effective capabilities (drives which UI actions show)."""
    return MyPermissionsResponse(
        user_id=actor.user_id,
        role=actor.role.value,
        capabilities=actor.capabilities.to_dict(),
    )
