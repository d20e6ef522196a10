"""Redis cache for per-role permission override records.

Values are stored as JSON with a TTL. A Redis outage turns every read into
a miss and every write into a no-op; the resolver then goes to the database.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from taskboard.core.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheService:
    """Implements ICacheService. connect() on startup, disconnect() on shutdown."""

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        self.redis = redis_client

    def is_available(self) -> bool:
        return self.redis is not None

    async def connect(self) -> None:
        if self.redis is not None:
            return
        settings = get_settings()
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=(
                settings.redis_password.get_secret_value()
                if settings.redis_password
                else None
            ),
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning(
                "Permission cache off: Redis at %s:%s unreachable (%s)",
                settings.redis_host,
                settings.redis_port,
                e,
            )
            await client.aclose()
            return
        self.redis = client
        logger.info("Permission cache on Redis %s:%s", settings.redis_host, settings.redis_port)

    async def disconnect(self) -> None:
        if self.redis is None:
            return
        client, self.redis = self.redis, None
        await client.aclose()

    async def _run(
        self, op: str, key: str, call: Callable[[redis.Redis], Awaitable[T]]
    ) -> tuple[bool, T | None]:
        """Run call against Redis; (False, None) when unavailable or on error."""
        if self.redis is None:
            return False, None
        try:
            return True, await call(self.redis)
        except redis.RedisError:
            logger.warning("Cache %s failed for %s", op, key, exc_info=True)
            return False, None

    async def get(self, key: str) -> Any | None:
        """Decoded value for key, or None on miss, error or bad JSON."""
        _, raw = await self._run("get", key, lambda r: r.get(key))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring cache entry %s: not JSON", key)
            return None

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        payload = json.dumps(value)
        ok, _ = await self._run("set", key, lambda r: r.setex(key, ttl, payload))
        return ok

    async def delete(self, key: str) -> bool:
        ok, _ = await self._run("delete", key, lambda r: r.delete(key))
        return ok
