"""DTOs for user provisioning (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class InvitedUser:
    id: str
    email: str
    full_name: str | None


@dataclass(frozen=True)
class InviteResult:
    """Success reply of the provisioning collaborator."""

    success: bool
    user: InvitedUser | None
    message: str | None
