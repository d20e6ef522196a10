"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"
    assert data.get("version")


async def test_readiness_without_database_returns_503(client: AsyncClient) -> None:
    """GET /api/v1/health/ready is 503 when DATABASE_URL is not set."""
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    """A safe client-provided X-Request-ID comes back unchanged."""
    response = await client.get(
        "/api/v1/health", headers={"X-Request-ID": "abc-123_def"}
    )
    assert response.headers.get("X-Request-ID") == "abc-123_def"


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    """A request ID with disallowed characters is replaced by a generated one."""
    response = await client.get(
        "/api/v1/health", headers={"X-Request-ID": "bad id;injected=yes"}
    )
    returned = response.headers.get("X-Request-ID")
    assert returned
    assert returned != "bad id;injected=yes"
    assert " " not in returned
