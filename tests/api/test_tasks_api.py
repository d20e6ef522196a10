"""Task endpoints with fake-backed services and an overridden actor."""

from contextlib import asynccontextmanager

import pytest
from httpx import AsyncClient

from fakes import FakeEmployeeRepository
from taskboard.api.v1.dependencies import (
    get_bulk_approve_use_case,
    get_current_actor,
    get_employee_service,
    get_note_service,
    get_note_service_for_write,
    get_task_service,
    get_task_service_for_write,
)
from taskboard.application.use_cases.employees import EmployeeService
from taskboard.application.use_cases.tasks import BulkApproveUseCase
from taskboard.domain.enums import RoleName
from taskboard.main import app


@pytest.fixture
def as_actor(task_service, note_service, make_actor):
    """Wire fake services into the app and act as the given role."""

    def _as(role: RoleName = RoleName.ADMIN, user_id: str = "api-user"):
        actor = make_actor(role, user_id)
        app.dependency_overrides[get_current_actor] = lambda: actor
        app.dependency_overrides[get_task_service] = lambda: task_service
        app.dependency_overrides[get_task_service_for_write] = lambda: task_service
        app.dependency_overrides[get_note_service] = lambda: note_service
        app.dependency_overrides[get_note_service_for_write] = lambda: note_service
        return actor

    return _as


async def test_create_get_and_list(client: AsyncClient, as_actor) -> None:
    as_actor()
    created = await client.post("/api/v1/tasks", json={"title": "Q1 budget review"})
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "new"
    assert body["priority"] == "medium"
    assert body["assignees"] == []

    fetched = await client.get(f"/api/v1/tasks/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["title"] == "Q1 budget review"

    listed = await client.get("/api/v1/tasks", params={"status": "new"})
    assert [t["id"] for t in listed.json()] == [body["id"]]


async def test_validation_and_not_found_mapping(client: AsyncClient, as_actor) -> None:
    as_actor()
    blank = await client.post("/api/v1/tasks", json={"title": "   "})
    assert blank.status_code == 400
    assert blank.json()["error"] == "VALIDATION_ERROR"

    missing_body = await client.post("/api/v1/tasks", json={})
    assert missing_body.status_code == 422

    missing = await client.get("/api/v1/tasks/nope")
    assert missing.status_code == 404
    assert missing.json()["details"] == {"resource_type": "task", "resource_id": "nope"}


async def test_viewer_is_forbidden_to_create(client: AsyncClient, as_actor) -> None:
    as_actor(RoleName.VIEWER)
    response = await client.post("/api/v1/tasks", json={"title": "T"})
    assert response.status_code == 403
    assert response.json()["details"]["capability"] == "can_create_tasks"


async def test_patch_applies_only_sent_fields(client: AsyncClient, as_actor) -> None:
    as_actor()
    task = (
        await client.post("/api/v1/tasks", json={"title": "T", "topic": "ops"})
    ).json()
    response = await client.patch(
        f"/api/v1/tasks/{task['id']}", json={"priority": "urgent", "topic": None}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["priority"] == "urgent"
    assert data["topic"] is None
    assert data["title"] == "T"

    unknown = await client.patch(f"/api/v1/tasks/{task['id']}", json={"created_by": "x"})
    assert unknown.status_code == 422


async def test_direct_approve_and_stats(client: AsyncClient, as_actor, store) -> None:
    actor = as_actor()
    approver = store.add_employee("Dana", user_id=actor.user_id)
    task = (await client.post("/api/v1/tasks", json={"title": "T"})).json()

    response = await client.post(
        f"/api/v1/tasks/{task['id']}/direct-approve", json={"note": "looks good"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "approved"
    assert data["approved_by"] == approver.id
    assert data["approved_at"] is not None

    stats = (await client.get("/api/v1/tasks/stats")).json()
    assert stats == {"open": 1, "pending_approval": 0, "completed": 0, "overdue": 0}


async def test_toggle_assignee_endpoint(client: AsyncClient, as_actor, store) -> None:
    as_actor()
    a = store.add_employee("A")
    b = store.add_employee("B")
    task = (await client.post("/api/v1/tasks", json={"title": "T"})).json()
    base = f"/api/v1/tasks/{task['id']}/assignees"

    await client.post(f"{base}/{a.id}/toggle")
    await client.post(f"{base}/{b.id}/toggle")
    removed = await client.post(f"{base}/{a.id}/toggle")

    assert removed.json() == {
        "task_id": task["id"],
        "employee_id": a.id,
        "action": "removed",
        "assigned_to": b.id,
    }


async def test_bulk_approve_endpoint(client: AsyncClient, as_actor, task_service) -> None:
    as_actor()

    @asynccontextmanager
    async def factory():
        yield task_service

    app.dependency_overrides[get_bulk_approve_use_case] = lambda: BulkApproveUseCase(
        factory
    )
    task = (await client.post("/api/v1/tasks", json={"title": "T"})).json()
    response = await client.post(
        "/api/v1/tasks/bulk-approve", json={"task_ids": [task["id"], "ghost"]}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["succeeded"] == 1
    assert data["failed"] == 1
    assert data["results"][1]["error_code"] == "RESOURCE_NOT_FOUND"


async def test_notes_endpoints(client: AsyncClient, as_actor) -> None:
    as_actor()
    task = (await client.post("/api/v1/tasks", json={"title": "T"})).json()
    created = await client.post(
        f"/api/v1/tasks/{task['id']}/notes", json={"content": "called the vendor"}
    )
    assert created.status_code == 201
    note_id = created.json()["id"]

    listed = await client.get(f"/api/v1/tasks/{task['id']}/notes")
    assert [n["id"] for n in listed.json()] == [note_id]

    deleted = await client.delete(f"/api/v1/tasks/{task['id']}/notes/{note_id}")
    assert deleted.status_code == 204


async def test_delete_task_endpoint(client: AsyncClient, as_actor) -> None:
    as_actor()
    task = (await client.post("/api/v1/tasks", json={"title": "T"})).json()
    assert (await client.delete(f"/api/v1/tasks/{task['id']}")).status_code == 204
    assert (await client.get(f"/api/v1/tasks/{task['id']}")).status_code == 404


async def test_employees_endpoint(client: AsyncClient, as_actor, store) -> None:
    as_actor(RoleName.VIEWER)
    store.add_employee("Amy", email="amy@example.com")
    app.dependency_overrides[get_employee_service] = lambda: EmployeeService(
        FakeEmployeeRepository(store)
    )
    response = await client.get("/api/v1/employees")
    assert response.status_code == 200
    assert response.json()[0]["email"] == "amy@example.com"
