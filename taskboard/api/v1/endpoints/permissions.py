"""Per-role permission override management."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from taskboard.api.v1.dependencies import (
    get_current_actor,
    get_permission_settings_service,
)
from taskboard.application.dtos.actor import ActorContext
from taskboard.application.services.permission_settings_service import (
    PermissionSettingsService,
)
from taskboard.core.limiter import limit_writes
from taskboard.schemas.permission import (
    PermissionOverrideUpdate,
    RolePermissionsResponse,
)

router = APIRouter()


@router.get("", response_model=list[RolePermissionsResponse])
async def list_permission_overrides(
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    settings_svc: Annotated[
        PermissionSettingsService, Depends(get_permission_settings_service)
    ],
):
    """Every role, highest first, with its override and effective capabilities."""
    items = await settings_svc.list_overrides(actor)
    return [RolePermissionsResponse.from_result(i) for i in items]


@router.put("/{role}", response_model=RolePermissionsResponse)
@limit_writes
async def upsert_permission_override(
    request: Request,
    role: str,
    body: PermissionOverrideUpdate,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    settings_svc: Annotated[
        PermissionSettingsService, Depends(get_permission_settings_service)
    ],
):
    """Write the given flags for role; null clears a flag back to its default."""
    result = await settings_svc.upsert_override(actor, role, body.flags)
    return RolePermissionsResponse.from_result(result)


@router.post("/{role}/reset", response_model=RolePermissionsResponse)
@limit_writes
async def reset_permission_override(
    request: Request,
    role: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    settings_svc: Annotated[
        PermissionSettingsService, Depends(get_permission_settings_service)
    ],
):
    result = await settings_svc.reset_override(actor, role)
    return RolePermissionsResponse.from_result(result)
