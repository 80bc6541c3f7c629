"""
Redis-backed cache gateway.

Every operation is best-effort: a cache failure is logged and reported as
a miss (or False) so that callers fall through to the authoritative fetch
path. Cache unavailability costs latency, never correctness.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Any, Protocol, TypeVar

import pydantic_core
from pydantic import TypeAdapter, ValidationError
from redis.asyncio import Redis

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheGateway(Protocol):
    async def exists(self, key: str) -> bool: ...

    async def get(self, key: str, shape: type[T]) -> T | None: ...

    async def set(self, key: str, value: Any, ttl: timedelta) -> bool: ...

    async def delete(self, key: str) -> bool: ...

    async def invalidate_pattern(self, pattern: str) -> bool: ...

    async def health_check(self) -> bool: ...

    async def get_stats(self) -> dict[str, Any]: ...


class CacheKeys:
    """Deterministic, resource-scoped cache keys."""

    @staticmethod
    def matches(date: str) -> str:
        return f"matches:{date}"

    @staticmethod
    def fixture(match_id: str) -> str:
        return f"fixture:{match_id}"

    @staticmethod
    def lineup(match_id: str) -> str:
        return f"lineup:{match_id}"

    @staticmethod
    def team_squad(team_id: int) -> str:
        # Keyed by team, not match: one squad serves every lineup of that team.
        return f"team_squad:{team_id}"

    @staticmethod
    def leagues(year: int) -> str:
        return f"leagues:{year}"

    @staticmethod
    def team_standings(team_id: str, year: int) -> str:
        return f"team_standings:{team_id}:{year}"

    @staticmethod
    def league_standings(league_id: str, season: str) -> str:
        return f"league_standings:{league_id}:{season}"

    @staticmethod
    def news(query: str, language: str) -> str:
        return f"google_news:{query}:{language}"

    @staticmethod
    def debate_prompt(match_id: str, debate_type: str) -> str:
        return f"debate_prompt:{match_id}:{debate_type}"


@lru_cache(maxsize=128)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


class RedisCacheGateway:
    """CacheGateway over redis.asyncio storing JSON payloads."""

    def __init__(self, redis: Redis, prefix: str = ""):
        self.redis = redis
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}" if self.prefix else key

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self.redis.exists(self._key(key)))
        except Exception as e:
            logger.warning("Cache exists check failed for %s: %s", key, e)
            return False

    async def get(self, key: str, shape: type[T]) -> T | None:
        try:
            raw = await self.redis.get(self._key(key))
        except Exception as e:
            logger.warning("Cache get failed for %s: %s", key, e)
            return None

        if raw is None:
            logger.debug("Cache miss for %s", key)
            return None

        try:
            value = _adapter(shape).validate_json(raw)
        except ValidationError as e:
            logger.warning("Cached payload for %s does not match expected shape: %s", key, e)
            return None

        logger.debug("Cache hit for %s", key)
        return value

    async def set(self, key: str, value: Any, ttl: timedelta) -> bool:
        seconds = max(1, int(ttl.total_seconds()))
        try:
            payload = pydantic_core.to_json(value, by_alias=True)
            await self.redis.set(self._key(key), payload, ex=seconds)
        except Exception as e:
            logger.warning("Cache set failed for %s: %s", key, e)
            return False

        logger.debug("Cached %s for %ss", key, seconds)
        return True

    async def delete(self, key: str) -> bool:
        try:
            await self.redis.delete(self._key(key))
        except Exception as e:
            logger.warning("Cache delete failed for %s: %s", key, e)
            return False
        return True

    async def invalidate_pattern(self, pattern: str) -> bool:
        """Delete all cache keys matching a pattern (e.g. 'lineup:*')."""
        full_pattern = self._key(pattern)
        try:
            keys = []
            async for key in self.redis.scan_iter(match=full_pattern):
                keys.append(key)
            if keys:
                await self.redis.delete(*keys)
                logger.debug("Invalidated %d cache keys matching %s", len(keys), full_pattern)
        except Exception as e:
            logger.warning("Cache invalidation failed for pattern %s: %s", pattern, e)
            return False
        return True

    async def health_check(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except Exception as e:
            logger.warning("Redis health check failed: %s", e)
            return False

    async def get_stats(self) -> dict[str, Any]:
        try:
            info = await self.redis.info()
            keys = await self.redis.dbsize()
        except Exception as e:
            logger.warning("Failed to read Redis stats: %s", e)
            return {"available": False}

        return {
            "available": True,
            "keys": keys,
            "used_memory_human": info.get("used_memory_human"),
            "connected_clients": info.get("connected_clients"),
            "keyspace_hits": info.get("keyspace_hits"),
            "keyspace_misses": info.get("keyspace_misses"),
        }

    async def close(self) -> None:
        await self.redis.aclose()


class NullCacheGateway:
    """Cache disabled: every read misses, every write is dropped."""

    async def exists(self, key: str) -> bool:
        return False

    async def get(self, key: str, shape: type[T]) -> T | None:
        return None

    async def set(self, key: str, value: Any, ttl: timedelta) -> bool:
        return False

    async def delete(self, key: str) -> bool:
        return False

    async def invalidate_pattern(self, pattern: str) -> bool:
        return False

    async def health_check(self) -> bool:
        return False

    async def get_stats(self) -> dict[str, Any]:
        return {"available": False}


_gateway: RedisCacheGateway | None = None
_null_gateway = NullCacheGateway()


async def init_cache(settings: Settings | None = None) -> None:
    """Initialize the Redis cache gateway. Call from app lifespan."""
    global _gateway
    settings = settings or get_settings()
    if not settings.cache_enabled:
        logger.info("Redis cache disabled via CACHE_ENABLED=false")
        return
    try:
        redis = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        _gateway = RedisCacheGateway(redis, prefix=settings.cache_prefix)
        logger.info("Redis cache initialized")
    except Exception as e:
        logger.warning("Redis cache init failed, caching disabled: %s", e)


async def close_cache() -> None:
    global _gateway
    if _gateway is None:
        return
    try:
        await _gateway.close()
    finally:
        _gateway = None


def get_cache() -> CacheGateway:
    if _gateway is None:
        return _null_gateway
    return _gateway
