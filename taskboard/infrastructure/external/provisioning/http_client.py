"""HTTP client for the external invite-user collaborator."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from taskboard.application.dtos.user import InvitedUser, InviteResult
from taskboard.domain.exceptions import ProvisioningException

logger = logging.getLogger(__name__)


class HttpProvisioningClient:
    """IProvisioningClient over HTTP.

    POSTs {email, full_name, role} with the caller's bearer token so the
    collaborator can verify the caller and apply its own admin/ceo rule.
    Replies are {success, user, message} or {error}.
    """

    def __init__(
        self,
        url: str | None,
        *,
        timeout: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._shared_http = http_client

    @asynccontextmanager
    async def _http_cm(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield shared HTTP client or a short-lived one."""
        if self._shared_http is not None:
            yield self._shared_http
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def invite_user(
        self,
        *,
        email: str,
        full_name: str,
        role: str,
        bearer_token: str,
    ) -> InviteResult:
        if not self.url:
            raise ProvisioningException("User provisioning is not configured")
        try:
            async with self._http_cm() as client:
                response = await client.post(
                    self.url,
                    json={"email": email, "full_name": full_name, "role": role},
                    headers={"Authorization": f"Bearer {bearer_token}"},
                )
        except httpx.HTTPError as e:
            logger.warning("Provisioning request failed: %s", e)
            raise ProvisioningException("User provisioning service unreachable") from e

        try:
            body: Any = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error or body.get("error"):
            message = str(body.get("error") or f"Provisioning failed ({response.status_code})")
            logger.warning(
                "Provisioning rejected invite (status %s): %s",
                response.status_code,
                message,
            )
            raise ProvisioningException(message, status_code=response.status_code)

        user = body.get("user") or None
        return InviteResult(
            success=bool(body.get("success", True)),
            user=(
                InvitedUser(
                    id=str(user.get("id", "")),
                    email=str(user.get("email", email)),
                    full_name=user.get("full_name", full_name),
                )
                if isinstance(user, dict)
                else None
            ),
            message=body.get("message"),
        )
