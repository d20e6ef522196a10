"""Defer side effects (change events, cache invalidation, link delivery) to after commit."""

from collections.abc import Awaitable, Callable
from typing import Any

from taskboard.application.interfaces.services import IAfterCommit


async def after_commit_or_now(
    hooks: IAfterCommit | None, callback: Callable[[], Awaitable[Any]]
) -> None:
    """Queue callback on hooks; run it right away when there is no transaction to wait for."""
    if hooks is None:
        await callback()
    else:
        hooks.add(callback)
