"""Redis cache, change publisher, WebSocket manager and notification adapters."""

import json
from unittest.mock import AsyncMock, MagicMock

import redis.asyncio as redis

from taskboard.api.websocket import ConnectionManager
from taskboard.application.dtos.employee import EmployeeResult
from taskboard.core.constants import CHANGES_CHANNEL
from taskboard.domain.enums import ChangeTopic
from taskboard.infrastructure.cache.redis_cache import CacheService
from taskboard.infrastructure.messaging.redis_pubsub import ChangeEvent, ChangePublisher
from taskboard.infrastructure.services.notification_service import (
    LogOnlyNotificationService,
    _redact_link,
)


async def test_cache_round_trips_json() -> None:
    client = AsyncMock()
    client.get.return_value = json.dumps({"can_edit_tasks": True})
    cache = CacheService(redis_client=client)

    assert cache.is_available() is True
    assert await cache.set("k", {"a": 1}, ttl=30) is True
    client.setex.assert_awaited_once_with("k", 30, json.dumps({"a": 1}))
    assert await cache.get("k") == {"can_edit_tasks": True}


async def test_cache_errors_are_misses() -> None:
    client = AsyncMock()
    client.get.side_effect = redis.ConnectionError("gone")
    client.delete.side_effect = redis.ConnectionError("gone")
    cache = CacheService(redis_client=client)
    assert await cache.get("k") is None
    assert await cache.delete("k") is False


async def test_cache_without_connection_is_unavailable() -> None:
    cache = CacheService()
    assert cache.is_available() is False
    assert await cache.get("k") is None
    assert await cache.set("k", 1) is False


async def test_publisher_publishes_change_event() -> None:
    client = AsyncMock()
    publisher = ChangePublisher(redis_client=client)

    ok = await publisher.publish(ChangeTopic.TASKS, "created", {"task_id": "t1"})

    assert ok is True
    channel, raw = client.publish.await_args.args
    assert channel == CHANGES_CHANNEL
    event = ChangeEvent.from_dict(json.loads(raw))
    assert event.topic is ChangeTopic.TASKS
    assert event.action == "created"
    assert event.payload == {"task_id": "t1"}
    assert event.timestamp


async def test_publisher_never_raises() -> None:
    client = AsyncMock()
    client.publish.side_effect = redis.ConnectionError("gone")
    assert await ChangePublisher(redis_client=client).publish(
        ChangeTopic.TASKS, "deleted", {}
    ) is False
    assert await ChangePublisher().publish(ChangeTopic.TASKS, "deleted", {}) is False


async def test_broadcast_drops_dead_connections() -> None:
    manager = ConnectionManager()
    alive = MagicMock()
    alive.accept = AsyncMock()
    alive.send_json = AsyncMock()
    dead = MagicMock()
    dead.accept = AsyncMock()
    dead.send_json = AsyncMock(side_effect=RuntimeError("closed"))

    await manager.connect(alive, "u1")
    await manager.connect(dead, "u2")
    await manager.broadcast({"type": "change"})

    alive.send_json.assert_awaited_once_with({"type": "change"})
    assert manager.connection_count == 1
    await manager.disconnect(alive)
    assert manager.connection_count == 0


def test_redact_link_hides_token() -> None:
    assert (
        _redact_link("https://board.example.com/approve/secret-token")
        == "https://board.example.com/approve/<token>"
    )
    assert _redact_link("garbage") == "<link>"


async def test_log_only_notifier_does_not_log_token(caplog) -> None:
    employee = EmployeeResult(
        id="e1",
        name="Eve",
        email="eve@example.com",
        phone=None,
        telegram_chat_id="123",
        avatar_url=None,
        role=None,
        is_active=True,
        user_id=None,
    )
    with caplog.at_level("INFO"):
        await LogOnlyNotificationService().notify_approval_requested(
            employee, "Budget", "https://x.example/approve/very-secret", None
        )
    assert "very-secret" not in caplog.text
    assert "email, telegram" in caplog.text
