"""Redis Pub/Sub for change notifications.

Services publish a ChangeEvent after each successful write; a background task
subscribes to the channel and fans every event out to connected WebSocket
clients, which refetch what they display. Delivery is best-effort.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any

import redis.asyncio as redis

from taskboard.core.config import get_settings
from taskboard.core.constants import CHANGES_CHANNEL
from taskboard.domain.enums import ChangeTopic
from taskboard.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class ChangeEvent:
    """Change notification payload for Redis."""

    topic: ChangeTopic
    action: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON publish."""
        data = asdict(self)
        data["topic"] = self.topic.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChangeEvent:
        """Deserialize from Redis message."""
        data = dict(data)
        data["topic"] = ChangeTopic(data["topic"])
        return cls(**data)


class _RedisPubSubBase:
    """Shared Redis connection logic for change pub/sub."""

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize. Pass redis_client for DI/testing."""
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self._connected:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                decode_responses=True,
                socket_connect_timeout=5,
            )
            await self.redis.ping()
            self._connected = True
            logger.info("Redis pub/sub connected")
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis pub/sub connection failed: %s", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis pub/sub disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected."""
        return self._connected and self.redis is not None


class ChangePublisher(_RedisPubSubBase):
    """Publishes change events to the shared changes channel. Implements IChangePublisher."""

    async def publish(
        self, topic: ChangeTopic, action: str, payload: dict[str, Any]
    ) -> bool:
        """Publish one change. Returns False (never raises) when Redis is unavailable or fails."""
        if not self.is_available() or self.redis is None:
            logger.debug("Redis not available, skipping publish")
            return False
        event = ChangeEvent(
            topic=topic,
            action=action,
            payload=payload,
            timestamp=utc_now().isoformat(),
        )
        try:
            await self.redis.publish(CHANGES_CHANNEL, json.dumps(event.to_dict()))
        except Exception:
            logger.exception("Failed to publish change %s/%s", topic.value, action)
            return False
        logger.debug("Published change %s/%s", topic.value, action)
        return True


async def run_change_broadcast(app: Any) -> None:
    """Subscribe to the changes channel and broadcast each event to WebSocket clients.

    Run as a background task from lifespan when Redis is enabled. Cancelling
    the task stops the loop.
    """
    subscriber = _RedisPubSubBase()
    await subscriber.connect()
    if not subscriber.is_available() or subscriber.redis is None:
        logger.warning("Redis not available, change broadcast not started")
        return
    pubsub = subscriber.redis.pubsub()
    try:
        await pubsub.subscribe(CHANGES_CHANNEL)
        logger.info("Subscribed to %s for WebSocket broadcast", CHANGES_CHANNEL)
        async for message in pubsub.listen():
            if message["type"] != "message":
                continue
            try:
                event = ChangeEvent.from_dict(json.loads(message["data"]))
            except (json.JSONDecodeError, KeyError, TypeError, ValueError):
                logger.exception("Failed to parse change message")
                continue
            manager = getattr(app.state, "ws_manager", None)
            if manager is not None:
                await manager.broadcast({**event.to_dict(), "type": "change"})
    except asyncio.CancelledError:
        logger.info("Change broadcast task cancelled")
    except Exception:
        logger.exception("Change broadcast error")
    finally:
        await pubsub.unsubscribe(CHANGES_CHANNEL)
        await pubsub.aclose()
        await subscriber.disconnect()


_publisher: ChangePublisher | None = None


def get_change_publisher() -> ChangePublisher | None:
    """Return the global change publisher (set at startup)."""
    return _publisher


def set_change_publisher(publisher: ChangePublisher | None) -> None:
    """Set the global change publisher."""
    global _publisher
    _publisher = publisher
