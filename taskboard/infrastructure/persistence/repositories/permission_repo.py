"""User role and permission override repositories."""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.dtos.permission import PermissionOverrideResult
from taskboard.domain.value_objects import CAPABILITY_FLAGS
from taskboard.infrastructure.persistence.models.permission import (
    PermissionSetting,
    UserRole,
)
from taskboard.shared.utils.datetime import ensure_utc
from taskboard.shared.utils.generators import generate_cuid


def _to_result(p: PermissionSetting) -> PermissionOverrideResult:
    """Map PermissionSetting ORM to PermissionOverrideResult DTO."""
    return PermissionOverrideResult(
        id=p.id,
        role=p.role,
        flags={name: getattr(p, name) for name in CAPABILITY_FLAGS},
        version=p.version,
        updated_at=ensure_utc(p.updated_at),
    )


class UserRoleRepository:
    """User role repository. Implements IUserRoleRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_roles(self, user_id: str) -> list[str]:
        result = await self.db.execute(
            select(UserRole.role).where(UserRole.user_id == user_id)
        )
        return list(result.scalars().all())


class PermissionOverrideRepository:
    """Permission override repository. Implements IPermissionOverrideRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_role(self, role: str) -> PermissionOverrideResult | None:
        result = await self.db.execute(
            select(PermissionSetting)
            .where(PermissionSetting.role == role)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def list_all(self) -> list[PermissionOverrideResult]:
        result = await self.db.execute(
            select(PermissionSetting).order_by(PermissionSetting.role)
        )
        return [_to_result(p) for p in result.scalars().all()]

    async def upsert(
        self,
        role: str,
        flags: Mapping[str, bool | None],
        *,
        replace: bool = False,
    ) -> PermissionOverrideResult:
        """INSERT ... ON CONFLICT (role) DO UPDATE; version starts at 1 and increments per write."""
        values: dict[str, bool | None] = (
            {name: None for name in CAPABILITY_FLAGS} if replace else {}
        )
        values.update({k: v for k, v in flags.items() if k in CAPABILITY_FLAGS})
        stmt = pg_insert(PermissionSetting).values(
            id=generate_cuid(), role=role, version=1, **values
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[PermissionSetting.role],
            set_={
                **values,
                "version": PermissionSetting.version + 1,
                "updated_at": func.now(),
            },
        )
        await self.db.execute(stmt)
        record = await self.get_by_role(role)
        if record is None:
            raise RuntimeError(f"Permission override for role {role!r} vanished after upsert")
        return record
