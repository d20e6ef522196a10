"""Request timeout middleware.

A request still running after timeout_seconds is cancelled. The client gets a
504 unless part of the response was already sent.
"""

import asyncio
import logging

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class TimeoutMiddleware:
    def __init__(self, app: ASGIApp, timeout_seconds: float) -> None:
        self.app = app
        self.timeout_seconds = timeout_seconds

    def _timeout_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=504,
            content={
                "error": "GATEWAY_TIMEOUT",
                "message": f"Request timed out after {self.timeout_seconds} seconds",
                "details": {"timeout_seconds": self.timeout_seconds},
            },
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def tracking_send(message: Message) -> None:
            nonlocal started
            started = started or message["type"] == "http.response.start"
            await send(message)

        try:
            async with asyncio.timeout(self.timeout_seconds):
                await self.app(scope, receive, tracking_send)
        except TimeoutError:
            logger.warning(
                "%s %s cancelled after %ss",
                scope.get("method"),
                scope.get("path"),
                self.timeout_seconds,
            )
            if not started:
                await self._timeout_response()(scope, receive, send)
