"""Public approval links and the authenticated approval, permission and invite endpoints."""

import httpx
import pytest
from httpx import AsyncClient

from fakes import FakeCache, FakePermissionOverrideRepository, FakeUserRoleRepository
from taskboard.api.v1.dependencies import (
    get_approval_service,
    get_approval_service_for_write,
    get_bearer_token,
    get_current_actor,
    get_invite_user_use_case,
    get_permission_settings_service,
)
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.application.services.permission_settings_service import (
    PermissionSettingsService,
)
from taskboard.application.use_cases.users import InviteUserUseCase
from taskboard.domain.enums import RoleName
from taskboard.infrastructure.external.provisioning.http_client import (
    HttpProvisioningClient,
)
from taskboard.main import app


@pytest.fixture
async def link(approval_service, task_service, store, admin):
    """Wire the fake approval service and issue one pending request."""
    app.dependency_overrides[get_approval_service] = lambda: approval_service
    app.dependency_overrides[get_approval_service_for_write] = lambda: approval_service
    store.profiles[admin.user_id] = "Admin Person"
    employee = store.add_employee("Eve")
    task = await task_service.create_task(admin, "Q1 budget review", topic="finance")
    return await approval_service.issue_request(admin, task.id, employee.id)


async def test_lookup_shows_public_view(client: AsyncClient, link) -> None:
    response = await client.get(f"/api/v1/public/approvals/{link.token}")
    assert response.status_code == 200
    data = response.json()
    assert data["task_title"] == "Q1 budget review"
    assert data["task_topic"] == "finance"
    assert data["request_status"] == "pending"
    assert data["requested_by_name"] == "Admin Person"


async def test_lookup_unknown_token_is_404(client: AsyncClient, link) -> None:
    response = await client.get("/api/v1/public/approvals/not-a-real-token")
    assert response.status_code == 404


async def test_respond_once_then_already_processed(
    client: AsyncClient, link, store
) -> None:
    first = await client.post(
        "/api/v1/public/approvals/respond",
        json={"token": link.token, "approved": True, "note": "ok"},
    )
    assert first.status_code == 200
    assert first.json()["success"] is True
    assert first.json()["task_id"] == link.request.task_id
    assert store.tasks[link.request.task_id].status == "approved"

    second = await client.post(
        "/api/v1/public/approvals/respond",
        json={"token": link.token, "approved": False},
    )
    assert second.status_code == 200
    assert second.json()["success"] is False
    assert second.json()["error"] == "already_processed"


async def test_respond_reports_not_found_and_expired(
    client: AsyncClient, link, clock
) -> None:
    unknown = await client.post(
        "/api/v1/public/approvals/respond", json={"token": "nope", "approved": True}
    )
    assert unknown.json()["error"] == "not_found"

    clock.advance(days=8)
    expired = await client.post(
        "/api/v1/public/approvals/respond", json={"token": link.token, "approved": True}
    )
    assert expired.json() == {
        "success": False,
        "error": "expired",
        "message": expired.json()["message"],
        "approved": None,
        "task_id": None,
    }


async def test_respond_rejects_empty_token(client: AsyncClient, link) -> None:
    response = await client.post(
        "/api/v1/public/approvals/respond", json={"token": "", "approved": True}
    )
    assert response.status_code == 422


async def test_cancel_by_requester(client: AsyncClient, link, admin) -> None:
    app.dependency_overrides[get_current_actor] = lambda: admin
    response = await client.post(
        f"/api/v1/approval-requests/{link.request.id}/cancel"
    )
    assert response.status_code == 200
    assert response.json()["status"] == "expired"

    lookup = await client.get(f"/api/v1/public/approvals/{link.token}")
    assert lookup.json()["request_status"] == "expired"


async def test_cancel_by_viewer_is_forbidden(
    client: AsyncClient, link, viewer
) -> None:
    app.dependency_overrides[get_current_actor] = lambda: viewer
    response = await client.post(
        f"/api/v1/approval-requests/{link.request.id}/cancel"
    )
    assert response.status_code == 403


@pytest.fixture
def settings_service(store) -> PermissionSettingsService:
    overrides = FakePermissionOverrideRepository(store)
    authorization = AuthorizationService(
        FakeUserRoleRepository(store), overrides, cache=FakeCache()
    )
    service = PermissionSettingsService(overrides, authorization)
    app.dependency_overrides[get_permission_settings_service] = lambda: service
    return service


async def test_permission_override_round(
    client: AsyncClient, settings_service, admin
) -> None:
    app.dependency_overrides[get_current_actor] = lambda: admin

    updated = await client.put(
        "/api/v1/permissions/viewer", json={"flags": {"can_create_tasks": True}}
    )
    assert updated.status_code == 200
    assert updated.json()["effective"]["can_create_tasks"] is True
    assert updated.json()["override"]["version"] == 1

    listed = await client.get("/api/v1/permissions")
    assert [r["role"] for r in listed.json()][0] == "admin"

    reset = await client.post("/api/v1/permissions/viewer/reset")
    assert reset.status_code == 200
    assert reset.json()["effective"]["can_create_tasks"] is False


async def test_permission_endpoints_require_manage_permissions(
    client: AsyncClient, settings_service, make_actor
) -> None:
    app.dependency_overrides[get_current_actor] = lambda: make_actor(RoleName.EDITOR)
    response = await client.get("/api/v1/permissions")
    assert response.status_code == 403


async def test_invite_passes_upstream_client_error_through(
    client: AsyncClient, admin
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"error": "User already exists"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_current_actor] = lambda: admin
    app.dependency_overrides[get_bearer_token] = lambda: "caller-token"
    app.dependency_overrides[get_invite_user_use_case] = lambda: InviteUserUseCase(
        HttpProvisioningClient("https://identity.example.com/invite", http_client=http)
    )

    response = await client.post(
        "/api/v1/users/invite",
        json={"email": "dup@example.com", "full_name": "Dup"},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "PROVISIONING_ERROR"
    assert response.json()["message"] == "User already exists"
    await http.aclose()
