"""Permission settings: list, edit and reset per-role override records."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import partial

from taskboard.application.dtos.actor import ActorContext
from taskboard.application.dtos.permission import RolePermissions
from taskboard.application.interfaces.repositories import (
    IPermissionOverrideRepository,
)
from taskboard.application.interfaces.services import IAfterCommit
from taskboard.application.services.after_commit import after_commit_or_now
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.domain.enums import ROLE_PRECEDENCE, RoleName
from taskboard.domain.exceptions import ValidationException
from taskboard.domain.value_objects import (
    CAPABILITY_FLAGS,
    default_capabilities,
    resolve_capabilities,
)

logger = logging.getLogger(__name__)

MANAGE_PERMISSIONS = "can_manage_permissions"


def _parse_role(role: str) -> RoleName:
    parsed = RoleName.parse(role)
    if parsed is None:
        raise ValidationException(
            f"Unknown role '{role}'. Must be one of: {', '.join(RoleName.values())}",
            field="role",
        )
    return parsed


def _validate_flags(flags: Mapping[str, bool | None]) -> dict[str, bool | None]:
    unknown = sorted(set(flags) - set(CAPABILITY_FLAGS))
    if unknown:
        raise ValidationException(
            f"Unknown permission flag(s): {', '.join(unknown)}", field=unknown[0]
        )
    return dict(flags)


class PermissionSettingsService:
    """Override matrix management. Every operation requires can_manage_permissions.

    The cached record for a role is dropped only after the write commits;
    dropping it earlier lets a concurrent reader cache the old row again.
    """

    def __init__(
        self,
        overrides: IPermissionOverrideRepository,
        authorization: AuthorizationService,
        after_commit: IAfterCommit | None = None,
    ) -> None:
        self.overrides = overrides
        self.authorization = authorization
        self.after_commit = after_commit

    async def _invalidate(self, role: RoleName) -> None:
        await after_commit_or_now(
            self.after_commit, partial(self.authorization.invalidate_role, role)
        )

    async def list_overrides(self, actor: ActorContext) -> list[RolePermissions]:
        """Return every role (highest first) with its override record and effective capabilities."""
        self.authorization.require_capability(actor, MANAGE_PERMISSIONS)
        records = {r.role: r for r in await self.overrides.list_all()}
        return [
            RolePermissions(
                role=role.value,
                override=records.get(role.value),
                effective=resolve_capabilities(
                    role,
                    records[role.value].flags if role.value in records else None,
                ),
            )
            for role in ROLE_PRECEDENCE
        ]

    async def upsert_override(
        self,
        actor: ActorContext,
        role: str,
        flags: Mapping[str, bool | None],
    ) -> RolePermissions:
        """Write the given flags for role (others unchanged); null clears a flag back to its default."""
        self.authorization.require_capability(actor, MANAGE_PERMISSIONS)
        parsed = _parse_role(role)
        record = await self.overrides.upsert(parsed.value, _validate_flags(flags))
        await self._invalidate(parsed)
        logger.info(
            "Permission override for role %s updated by %s (version %s)",
            parsed.value,
            actor.user_id,
            record.version,
        )
        return RolePermissions(
            role=parsed.value,
            override=record,
            effective=resolve_capabilities(parsed, record.flags),
        )

    async def reset_override(self, actor: ActorContext, role: str) -> RolePermissions:
        """Overwrite the role's record with its full default table."""
        self.authorization.require_capability(actor, MANAGE_PERMISSIONS)
        parsed = _parse_role(role)
        defaults = default_capabilities(parsed)
        record = await self.overrides.upsert(
            parsed.value, defaults.to_dict(), replace=True
        )
        await self._invalidate(parsed)
        logger.info(
            "Permission override for role %s reset to defaults by %s",
            parsed.value,
            actor.user_id,
        )
        return RolePermissions(role=parsed.value, override=record, effective=defaults)
