"""User provisioning use cases."""

from taskboard.application.use_cases.users.invite_user import InviteUserUseCase

__all__ = ["InviteUserUseCase"]
