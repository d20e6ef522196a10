"""Capability value objects: the effective permission set of a role.

A role's effective capabilities are its hard-coded defaults overlaid with the
flags present in that role's override record. Roles do not inherit from each
other; every role's defaults are spelled out in full.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from functools import lru_cache

from taskboard.domain.enums import RoleName


@dataclass(frozen=True)
class CapabilitySet:
    """Effective capability flags. All default to False (most restrictive)."""

    can_view_tasks: bool = False
    can_create_tasks: bool = False
    can_edit_tasks: bool = False
    can_delete_tasks: bool = False
    can_view_projects: bool = False
    can_create_projects: bool = False
    can_edit_projects: bool = False
    can_delete_projects: bool = False
    can_view_team: bool = False
    can_manage_team: bool = False
    can_view_procedures: bool = False
    can_manage_procedures: bool = False
    can_view_decisions: bool = False
    can_manage_decisions: bool = False
    can_view_security_docs: bool = False
    can_manage_security_docs: bool = False
    can_manage_users: bool = False
    can_manage_permissions: bool = False

    def has(self, capability: str) -> bool:
        """Return the flag value; unknown flag names are never granted."""
        if capability not in CAPABILITY_FLAGS:
            return False
        return bool(getattr(self, capability))

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)


CAPABILITY_FLAGS: tuple[str, ...] = tuple(f.name for f in fields(CapabilitySet))

_ALL = CapabilitySet(**{name: True for name in CAPABILITY_FLAGS})

DEFAULT_ROLE_CAPABILITIES: dict[RoleName, CapabilitySet] = {
    RoleName.CEO: _ALL,
    RoleName.ADMIN: _ALL,
    RoleName.MANAGER: CapabilitySet(
        can_view_tasks=True,
        can_create_tasks=True,
        can_edit_tasks=True,
        can_delete_tasks=True,
        can_view_projects=True,
        can_create_projects=True,
        can_edit_projects=True,
        can_delete_projects=False,
        can_view_team=True,
        can_manage_team=True,
        can_view_procedures=True,
        can_manage_procedures=True,
        can_view_decisions=True,
        can_manage_decisions=True,
        can_view_security_docs=True,
        can_manage_security_docs=False,
        can_manage_users=False,
        can_manage_permissions=False,
    ),
    RoleName.EDITOR: CapabilitySet(
        can_view_tasks=True,
        can_create_tasks=True,
        can_edit_tasks=True,
        can_view_projects=True,
        can_create_projects=True,
        can_edit_projects=True,
        can_view_team=True,
        can_view_procedures=True,
        can_view_decisions=True,
        can_view_security_docs=True,
    ),
    RoleName.TEAM_MEMBER: CapabilitySet(
        can_view_tasks=True,
        can_create_tasks=True,
        can_edit_tasks=True,
        can_view_projects=True,
        can_view_team=True,
        can_view_procedures=True,
        can_view_decisions=True,
    ),
    RoleName.VIEWER: CapabilitySet(
        can_view_tasks=True,
        can_view_projects=True,
        can_view_team=True,
        can_view_procedures=True,
        can_view_decisions=True,
    ),
}


def default_capabilities(role: RoleName | str | None) -> CapabilitySet:
    """Return the hard-coded defaults for role; unknown or missing roles get viewer defaults."""
    parsed = role if isinstance(role, RoleName) else RoleName.parse(role)
    if parsed is None:
        return DEFAULT_ROLE_CAPABILITIES[RoleName.VIEWER]
    return DEFAULT_ROLE_CAPABILITIES[parsed]


def normalize_override(
    override: Mapping[str, bool | None] | None,
) -> frozenset[tuple[str, bool]]:
    """Keep only known flags that are explicitly set (None means absent)."""
    if not override:
        return frozenset()
    return frozenset(
        (name, bool(value))
        for name, value in override.items()
        if name in CAPABILITY_FLAGS and value is not None
    )


@lru_cache(maxsize=256)
def _merge(role: str | None, override_items: frozenset[tuple[str, bool]]) -> CapabilitySet:
    base = default_capabilities(role)
    if not override_items:
        return base
    merged = base.to_dict()
    merged.update(dict(override_items))
    return CapabilitySet(**merged)


def resolve_capabilities(
    role: RoleName | str | None,
    override: Mapping[str, bool | None] | None = None,
) -> CapabilitySet:
    """Overlay the flags present in override on the role's defaults.

    Memoized on (role, override contents): an updated override is a different
    key, so a stale merge can never be returned.
    """
    role_key = role.value if isinstance(role, RoleName) else role
    return _merge(role_key, normalize_override(override))
