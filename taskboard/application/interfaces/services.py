"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure-backed services (DIP).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from taskboard.application.dtos.employee import EmployeeResult
    from taskboard.application.dtos.user import InviteResult
    from taskboard.domain.enums import ChangeTopic


# Cache service interface
class ICacheService(Protocol):
    """Minimal cache protocol for permission override caching (DIP)."""

    def is_available(self) -> bool:
        """Return True if cache is connected."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL. Returns True on success."""

    async def delete(self, key: str) -> bool:
        """Delete key. Returns True on success."""


# Post-commit work queue
class IAfterCommit(Protocol):
    """Work that must only happen once the current transaction has committed."""

    def add(self, callback: Callable[[], Awaitable[Any]]) -> None:
        """Queue callback; it is dropped if the transaction rolls back."""


# Change notification publisher interface
class IChangePublisher(Protocol):
    """Protocol for best-effort change notifications (observer pattern).

    Implementations must not raise: a failed publish never fails the write.
    """

    async def publish(
        self, topic: ChangeTopic, action: str, payload: dict[str, Any]
    ) -> bool:
        """Publish one change. Return True if delivered to the broker."""


# Notification service interface (approval link delivery)
class INotificationService(Protocol):
    """Protocol for telling an employee that their approval is requested."""

    async def notify_approval_requested(
        self,
        employee: EmployeeResult,
        task_title: str,
        magic_link: str,
        message: str | None,
    ) -> None:
        """Deliver the link (stubbed: log only)."""


# User provisioning client interface
class IProvisioningClient(Protocol):
    """Protocol for the external invite-user collaborator."""

    async def invite_user(
        self,
        *,
        email: str,
        full_name: str,
        role: str,
        bearer_token: str,
    ) -> InviteResult:
        """Create the account. Raise ProvisioningException on an error reply."""
