"""Domain value objects (immutable, identity-free)."""

from taskboard.domain.value_objects.capabilities import (
    CAPABILITY_FLAGS,
    DEFAULT_ROLE_CAPABILITIES,
    CapabilitySet,
    default_capabilities,
    resolve_capabilities,
)

__all__ = [
    "CAPABILITY_FLAGS",
    "DEFAULT_ROLE_CAPABILITIES",
    "CapabilitySet",
    "default_capabilities",
    "resolve_capabilities",
]
