"""Pytest configuration and fixtures for taskboard.

Environment is set before the app is imported: a test SECRET_KEY, no database
and no Redis. Service tests run against the in-memory fakes in fakes.py; HTTP
tests use taskboard.main:app with dependency_overrides.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("PUBLIC_BASE_URL", "https://board.example.com")

from collections.abc import Callable
from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from fakes import (
    FakeApprovalRequestRepository,
    FakeAssignmentRepository,
    FakeEmployeeRepository,
    FakeProfileRepository,
    FakeStore,
    FakeTaskNoteRepository,
    FakeTaskRepository,
    FixedClock,
    RecordingPublisher,
)
from taskboard.application.dtos.actor import ActorContext
from taskboard.application.use_cases.approvals import ApprovalService
from taskboard.application.use_cases.notes import TaskNoteService
from taskboard.application.use_cases.tasks import TaskService
from taskboard.core.config import get_settings
from taskboard.core.limiter import limiter
from taskboard.domain.enums import RoleName
from taskboard.domain.value_objects import default_capabilities
from taskboard.infrastructure.persistence import database
from taskboard.main import app
from taskboard.shared.utils.datetime import utc_now


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def make_actor() -> Callable[..., ActorContext]:
    """Build an ActorContext with the role's default capabilities."""

    def _make(role: RoleName = RoleName.ADMIN, user_id: str = "user-1") -> ActorContext:
        return ActorContext(
            user_id=user_id, role=role, capabilities=default_capabilities(role)
        )

    return _make


@pytest.fixture
def admin(make_actor) -> ActorContext:
    return make_actor(RoleName.ADMIN, "admin-user")


@pytest.fixture
def viewer(make_actor) -> ActorContext:
    return make_actor(RoleName.VIEWER, "viewer-user")


@pytest.fixture
def task_service(store, clock, publisher) -> TaskService:
    return TaskService(
        task_repo=FakeTaskRepository(store),
        assignment_repo=FakeAssignmentRepository(store),
        employee_repo=FakeEmployeeRepository(store),
        publisher=publisher,
        clock=clock,
    )


@pytest.fixture
def approval_repo(store) -> FakeApprovalRequestRepository:
    return FakeApprovalRequestRepository(store)


@pytest.fixture
def approval_service(
    store, clock, publisher, task_service, approval_repo
) -> ApprovalService:
    return ApprovalService(
        approval_repo=approval_repo,
        task_repo=FakeTaskRepository(store),
        employee_repo=FakeEmployeeRepository(store),
        profile_repo=FakeProfileRepository(store),
        task_service=task_service,
        publisher=publisher,
        public_base_url="https://board.example.com/",
        ttl_days=7,
        clock=clock,
    )


@pytest.fixture
def note_service(store) -> TaskNoteService:
    return TaskNoteService(FakeTaskNoteRepository(store), FakeTaskRepository(store))


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Mint an access token the way the identity provider does."""

    def _make(sub: str = "user-1", expires_in: timedelta = timedelta(hours=1)) -> str:
        settings = get_settings()
        return jwt.encode(
            {"sub": sub, "exp": utc_now() + expires_in},
            settings.secret_key.get_secret_value(),
            algorithm=settings.algorithm,
        )

    return _make


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI). Overrides are cleared afterwards."""
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository tests. Rolls back after test.

    Skips when DATABASE_URL is not set. Mark such tests @pytest.mark.requires_db;
    run without a database via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
