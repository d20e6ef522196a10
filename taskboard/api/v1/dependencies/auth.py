"""Authentication and capability dependencies.

A bearer JWT identifies the caller; AuthorizationService turns the user id
into an ActorContext (role + resolved capabilities) that every use case takes
explicitly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.dtos.actor import ActorContext
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.core.config import get_settings
from taskboard.domain.exceptions import AuthenticationException
from taskboard.infrastructure.persistence.database import get_db
from taskboard.infrastructure.persistence.repositories import (
    PermissionOverrideRepository,
    UserRoleRepository,
)
from taskboard.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(_http_bearer)
    ],
) -> str:
    """Raw bearer token from the Authorization header; 401 when absent."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Missing bearer token")
    return credentials.credentials


def get_current_user_id(
    token: Annotated[str, Depends(get_bearer_token)],
) -> str:
    """Verified user id (the token's sub claim)."""
    try:
        payload = verify_token(token)
    except ValueError as e:
        raise AuthenticationException("Invalid or expired token") from e
    return str(payload["sub"])


async def get_authorization_service(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthorizationService:
    """Build AuthorizationService with the optional Redis cache.

    Cache is set in app lifespan (app.state.cache) when Redis is enabled;
    otherwise cache is None and every lookup hits the DB.
    """
    return AuthorizationService(
        user_roles=UserRoleRepository(db),
        overrides=PermissionOverrideRepository(db),
        cache=getattr(request.app.state, "cache", None),
        cache_ttl=get_settings().cache_ttl_permissions,
    )


async def get_current_actor(
    user_id: Annotated[str, Depends(get_current_user_id)],
    authorization: Annotated[
        AuthorizationService, Depends(get_authorization_service)
    ],
) -> ActorContext:
    """ActorContext for the authenticated caller."""
    return await authorization.build_actor(user_id)

