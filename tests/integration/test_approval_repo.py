"""ApprovalRequestRepository conditional updates against Postgres."""

from datetime import timedelta

import pytest

from taskboard.infrastructure.persistence.models import Employee
from taskboard.infrastructure.persistence.repositories import (
    ApprovalRequestRepository,
    TaskRepository,
)
from taskboard.shared.utils.datetime import utc_now
from taskboard.shared.utils.generators import generate_approval_token, hash_token

pytestmark = pytest.mark.requires_db


@pytest.fixture
async def pending(db_session):
    employee = Employee(name="Approver")
    db_session.add(employee)
    await db_session.flush()
    task = await TaskRepository(db_session).create_task(
        title="Needs approval",
        topic=None,
        description=None,
        priority="medium",
        deadline=None,
        project_id=None,
        created_by="integration-user",
    )
    token = generate_approval_token()
    now = utc_now()
    request = await ApprovalRequestRepository(db_session).create_request(
        task_id=task.id,
        token_hash=hash_token(token),
        requested_by="integration-user",
        requested_from=employee.id,
        message=None,
        created_at=now,
        expires_at=now + timedelta(days=7),
    )
    return token, request


async def test_lookup_by_hash_only(db_session, pending) -> None:
    repo = ApprovalRequestRepository(db_session)
    token, request = pending
    found = await repo.get_by_token_hash(hash_token(token))
    assert found.id == request.id
    assert await repo.get_by_token_hash(token) is None


async def test_transition_only_from_pending(db_session, pending) -> None:
    repo = ApprovalRequestRepository(db_session)
    _, request = pending
    now = utc_now()

    won = await repo.transition_if_pending(request.id, "approved", now, response_note="ok")
    assert won.status == "approved"
    assert won.response_note == "ok"

    lost = await repo.transition_if_pending(request.id, "rejected", now)
    assert lost is None
    assert (await repo.get_by_id(request.id)).status == "approved"


async def test_force_expire_keeps_answer_time(db_session, pending) -> None:
    repo = ApprovalRequestRepository(db_session)
    _, request = pending
    answered_at = utc_now()
    await repo.transition_if_pending(request.id, "rejected", answered_at)

    expired = await repo.force_expire(request.id, answered_at + timedelta(hours=1))
    assert expired.status == "expired"
    assert expired.responded_at == answered_at


async def test_expire_pending_for_task(db_session, pending) -> None:
    repo = ApprovalRequestRepository(db_session)
    _, request = pending
    assert await repo.expire_pending_for_task(request.task_id, utc_now()) == 1
    assert await repo.expire_pending_for_task(request.task_id, utc_now()) == 0
