"""DTOs for per-role permission overrides (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from taskboard.domain.value_objects import CapabilitySet


@dataclass(frozen=True)
class PermissionOverrideResult:
    """Override record for one role. A None flag is absent and falls back to the default."""

    id: str
    role: str
    flags: dict[str, bool | None]
    version: int
    updated_at: datetime | None = None


@dataclass(frozen=True)
class RolePermissions:
    """A role's override record (if any) next to the capabilities it resolves to."""

    role: str
    override: PermissionOverrideResult | None
    effective: CapabilitySet
