"""Approval notifications: log-only sender."""

from __future__ import annotations

import logging

from taskboard.application.dtos.employee import EmployeeResult
from taskboard.core.constants import APPROVAL_LINK_PATH

logger = logging.getLogger(__name__)


def _redact_link(magic_link: str) -> str:
    """Keep the link shape for the log but drop the token."""
    marker = f"/{APPROVAL_LINK_PATH}/"
    head, sep, _ = magic_link.rpartition(marker)
    return f"{head}{sep}<token>" if sep else "<link>"


class LogOnlyNotificationService:
    """INotificationService implementation that logs instead of sending email/Telegram.

    Delivery channels are out of scope; production can swap in a real sender.
    """

    async def notify_approval_requested(
        self,
        employee: EmployeeResult,
        task_title: str,
        magic_link: str,
        message: str | None,
    ) -> None:
        channels = [
            name
            for name, value in (
                ("email", employee.email),
                ("telegram", employee.telegram_chat_id),
            )
            if value
        ]
        logger.info(
            "Approval notify: would send to employee %s via %s (task=%r, link=%s)",
            employee.id,
            ", ".join(channels) or "no channel",
            (task_title or "")[:80],
            _redact_link(magic_link),
        )
        if message:
            logger.debug("Approval notify message (first 500 chars): %s", message[:500])
