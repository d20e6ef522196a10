"""Caller identity passed explicitly into every service operation."""

from dataclasses import dataclass

from taskboard.domain.enums import RoleName
from taskboard.domain.value_objects import CapabilitySet


@dataclass(frozen=True)
class ActorContext:
    """Authenticated caller: user id, resolved role and effective capabilities."""

    user_id: str
    role: RoleName
    capabilities: CapabilitySet
