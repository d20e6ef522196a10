"""Invite a user through the external provisioning collaborator."""

from __future__ import annotations

import logging

from taskboard.application.dtos.actor import ActorContext
from taskboard.application.dtos.user import InviteResult
from taskboard.application.interfaces.services import IProvisioningClient
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.domain.enums import RoleName
from taskboard.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)


class InviteUserUseCase:
    """Validate the invite locally, then forward it with the caller's bearer token."""

    def __init__(self, provisioning: IProvisioningClient) -> None:
        self.provisioning = provisioning

    async def execute(
        self,
        actor: ActorContext,
        *,
        email: str,
        full_name: str,
        role: str,
        bearer_token: str,
    ) -> InviteResult:
        AuthorizationService.require_capability(actor, "can_manage_users")
        if RoleName.parse(role) is None:
            raise ValidationException(
                f"Unknown role '{role}'. Must be one of: {', '.join(RoleName.values())}",
                field="role",
            )
        if not full_name or not full_name.strip():
            raise ValidationException("Full name is required", field="full_name")
        result = await self.provisioning.invite_user(
            email=email.strip().lower(),
            full_name=full_name.strip(),
            role=role,
            bearer_token=bearer_token,
        )
        logger.info("User %s invited as %s by %s", email, role, actor.user_id)
        return result
