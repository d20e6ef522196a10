"""Request ID middleware.

Forwards a safe client-supplied request id or mints a new one, exposes it
to log records through request_id_var and echoes it on the response.
"""

import re
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from taskboard.shared.telemetry.logging import request_id_var

# Client ids end up in log lines; anything else is replaced.
_SAFE_REQUEST_ID = re.compile(r"[A-Za-z0-9_-]{1,64}")


def get_request_id() -> str | None:
    """Request ID of the request being handled, or None outside a request."""
    return request_id_var.get()


def resolve_request_id(supplied: str | None) -> str:
    candidate = (supplied or "").strip()
    if _SAFE_REQUEST_ID.fullmatch(candidate):
        return candidate
    return uuid.uuid4().hex


class RequestIDMiddleware:
    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = resolve_request_id(Headers(scope=scope).get(self.header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(self.header_name, request_id)
            await send(message)

        token = request_id_var.set(request_id)
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            request_id_var.reset(token)
