"""Request id and timeout middleware on a bare ASGI app."""

import asyncio

from httpx import ASGITransport, AsyncClient
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

from taskboard.middleware import RequestIDMiddleware, TimeoutMiddleware, get_request_id
from taskboard.middleware.request_id import resolve_request_id


async def _echo_request_id(request):
    return JSONResponse({"request_id": get_request_id()})


async def _slow(request):
    await asyncio.sleep(5)
    return JSONResponse({"ok": True})


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


def test_resolve_request_id() -> None:
    assert resolve_request_id(" abc-1_2 ") == "abc-1_2"
    assert len(resolve_request_id(None)) == 32
    assert resolve_request_id("x" * 65) != "x" * 65
    assert resolve_request_id("a b") != "a b"


async def test_request_id_visible_inside_handler() -> None:
    app = Starlette(routes=[Route("/", _echo_request_id)])
    app.add_middleware(RequestIDMiddleware, header_name="X-Trace")
    async with _client(app) as client:
        response = await client.get("/", headers={"X-Trace": "trace-7"})
    assert response.json() == {"request_id": "trace-7"}
    assert response.headers["X-Trace"] == "trace-7"
    assert get_request_id() is None


async def test_slow_request_gets_504() -> None:
    app = Starlette(routes=[Route("/", _slow)])
    app.add_middleware(TimeoutMiddleware, timeout_seconds=0.05)
    async with _client(app) as client:
        response = await client.get("/")
    assert response.status_code == 504
    assert response.json()["error"] == "GATEWAY_TIMEOUT"
