"""Cache layer: Redis-backed CacheService."""

from taskboard.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService"]
