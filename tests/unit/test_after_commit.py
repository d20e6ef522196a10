"""After-commit queue on transactional sessions."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest

from taskboard.infrastructure.persistence import database
from taskboard.infrastructure.persistence.database import AfterCommit, after_commit


class _Session:
    """Just enough of AsyncSession for the session helpers."""

    def __init__(self) -> None:
        self.info: dict = {}
        self.committed = False

    async def __aenter__(self) -> "_Session":
        return self

    async def __aexit__(self, *exc) -> bool:
        return False

    @asynccontextmanager
    async def begin(self):
        yield
        self.committed = True


@pytest.fixture
def session(monkeypatch) -> _Session:
    session = _Session()
    monkeypatch.setattr(database, "_session_factory", lambda: lambda: session)
    return session


async def test_request_transaction_runs_callbacks_after_commit(session) -> None:
    seen = []

    async def callback() -> None:
        seen.append(session.committed)

    gen = database.get_db_transactional()
    assert await gen.__anext__() is session
    after_commit(session).add(callback)
    with pytest.raises(StopAsyncIteration):
        await gen.__anext__()

    assert seen == [True]


async def test_request_transaction_drops_callbacks_on_rollback(session) -> None:
    callback = AsyncMock()
    gen = database.get_db_transactional()
    await gen.__anext__()
    after_commit(session).add(callback)

    with pytest.raises(RuntimeError):
        await gen.athrow(RuntimeError("boom"))

    assert session.committed is False
    callback.assert_not_awaited()


async def test_session_scope_commits_then_runs(session) -> None:
    callback = AsyncMock()
    async with database.session_scope() as scoped:
        after_commit(scoped).add(callback)
        callback.assert_not_awaited()
    callback.assert_awaited_once()

    failed = AsyncMock()
    with pytest.raises(ValueError):
        async with database.session_scope() as scoped:
            after_commit(scoped).add(failed)
            raise ValueError("rolled back")
    failed.assert_not_awaited()


async def test_failing_callback_does_not_stop_the_rest(caplog) -> None:
    queue = AfterCommit()
    broken = AsyncMock(side_effect=ConnectionError("redis down"))
    later = AsyncMock()
    queue.add(broken)
    queue.add(later)

    await queue.run()

    later.assert_awaited_once()
    assert queue.pending == 0
    assert "After-commit callback" in caplog.text
