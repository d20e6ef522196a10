"""Authorization service: role resolution and effective capabilities with override caching."""

from __future__ import annotations

import logging
from typing import Any

from taskboard.application.dtos.actor import ActorContext
from taskboard.application.interfaces.repositories import (
    IPermissionOverrideRepository,
    IUserRoleRepository,
)
from taskboard.application.interfaces.services import ICacheService
from taskboard.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_PERMISSION_OVERRIDE
from taskboard.domain.enums import ROLE_PRECEDENCE, RoleName
from taskboard.domain.exceptions import AuthorizationException
from taskboard.domain.value_objects import (
    CapabilitySet,
    default_capabilities,
    resolve_capabilities,
)

logger = logging.getLogger(__name__)


def override_cache_key(role: RoleName) -> str:
    return f"{CACHE_PREFIX_PERMISSION_OVERRIDE}{CACHE_KEY_SEP}{role.value}"


class AuthorizationService:
    """Resolves a user to an ActorContext and checks capabilities.

    Override records are cached per role (short TTL) and invalidated once each
    override write commits. The merge with defaults is memoized on the override
    contents, so a fresh record always yields a fresh capability set.
    Lookup failures never propagate: the caller is treated as a viewer.
    """

    def __init__(
        self,
        user_roles: IUserRoleRepository,
        overrides: IPermissionOverrideRepository,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
    ) -> None:
        self.user_roles = user_roles
        self.overrides = overrides
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def resolve_role(self, user_id: str) -> RoleName:
        """Return the user's highest-precedence role; viewer when none is assigned."""
        assigned = {RoleName.parse(r) for r in await self.user_roles.get_roles(user_id)}
        for role in ROLE_PRECEDENCE:
            if role in assigned:
                return role
        return RoleName.VIEWER

    async def get_override_flags(self, role: RoleName) -> dict[str, Any]:
        """Return the role's override flags ({} when no record exists). Uses cache if available."""
        key = override_cache_key(role)
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(key)
            if isinstance(cached, dict):
                return cached

        record = await self.overrides.get_by_role(role.value)
        flags = dict(record.flags) if record else {}
        if self.cache and self.cache.is_available():
            await self.cache.set(key, flags, ttl=self.cache_ttl)
        return flags

    async def resolve_capabilities(self, role: RoleName) -> CapabilitySet:
        """Return the effective capability set for role."""
        try:
            flags = await self.get_override_flags(role)
        except Exception:
            logger.exception(
                "Permission override lookup failed for role %s; using viewer defaults",
                role.value,
            )
            return default_capabilities(RoleName.VIEWER)
        return resolve_capabilities(role, flags)

    async def build_actor(self, user_id: str) -> ActorContext:
        """Resolve role and capabilities for an authenticated user."""
        try:
            role = await self.resolve_role(user_id)
        except Exception:
            logger.exception(
                "Role lookup failed for user %s; using viewer defaults", user_id
            )
            return ActorContext(
                user_id=user_id,
                role=RoleName.VIEWER,
                capabilities=default_capabilities(RoleName.VIEWER),
            )
        return ActorContext(
            user_id=user_id,
            role=role,
            capabilities=await self.resolve_capabilities(role),
        )

    @staticmethod
    def require_capability(actor: ActorContext, capability: str) -> None:
        """Raise AuthorizationException if the actor lacks capability."""
        if not actor.capabilities.has(capability):
            raise AuthorizationException(capability=capability)

    async def invalidate_role(self, role: RoleName) -> None:
        """Drop the cached override record for role."""
        if self.cache and self.cache.is_available():
            await self.cache.delete(override_cache_key(role))
