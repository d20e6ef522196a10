"""Authentication and permission resolution over HTTP."""

from datetime import timedelta

from httpx import AsyncClient
from starlette.testclient import TestClient

from fakes import FakePermissionOverrideRepository, FakeUserRoleRepository
from taskboard.api.v1.dependencies import get_authorization_service
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.main import app


async def test_missing_token_is_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/tasks")
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
    assert response.headers.get("WWW-Authenticate") == "Bearer"


async def test_invalid_and_expired_tokens_are_401(client: AsyncClient, make_token) -> None:
    bad = await client.get(
        "/api/v1/tasks", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert bad.status_code == 401
    expired = make_token("u1", expires_in=timedelta(minutes=-5))
    response = await client.get(
        "/api/v1/tasks", headers={"Authorization": f"Bearer {expired}"}
    )
    assert response.status_code == 401


async def test_valid_token_without_database_is_503(client: AsyncClient, make_token) -> None:
    response = await client.get(
        "/api/v1/me/permissions",
        headers={"Authorization": f"Bearer {make_token('u1')}"},
    )
    assert response.status_code == 503
    assert response.json()["error"] == "SERVICE_UNAVAILABLE"


async def test_me_permissions_resolves_role_and_override(
    client: AsyncClient, make_token, store
) -> None:
    store.user_roles["u1"] = ["team_member", "editor"]
    await FakePermissionOverrideRepository(store).upsert(
        "editor", {"can_delete_tasks": True}
    )
    app.dependency_overrides[get_authorization_service] = lambda: AuthorizationService(
        FakeUserRoleRepository(store), FakePermissionOverrideRepository(store)
    )

    response = await client.get(
        "/api/v1/me/permissions",
        headers={"Authorization": f"Bearer {make_token('u1')}"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "u1"
    assert data["role"] == "editor"
    assert data["capabilities"]["can_delete_tasks"] is True
    assert data["capabilities"]["can_manage_users"] is False


def test_websocket_requires_token() -> None:
    with TestClient(app) as tc:
        with tc.websocket_connect("/api/v1/ws") as ws:
            message = ws.receive()
    assert message["type"] == "websocket.close"
    assert message["code"] == 1008
