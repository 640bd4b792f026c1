"""
garage_api.cache.backends

Cache backends.

Responsibilities:
- `RedisCache`: JSON values with TTL in Redis (redis.asyncio).
- `NullCache`: no-op backend used when no Redis is configured or reachable.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from garage_api.observability.logging import get_logger

log = get_logger(__name__)


class Cache(ABC):
    @abstractmethod
    async def get_json(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss."""

    @abstractmethod
    async def set_json(self, key: str, value: Any, ttl: int) -> None: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> None: ...

    @abstractmethod
    async def ping(self) -> bool: ...

    async def close(self) -> None:
        return None


class NullCache(Cache):
    async def get_json(self, key: str) -> Any | None:
        return None

    async def set_json(self, key: str, value: Any, ttl: int) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None

    async def delete_prefix(self, prefix: str) -> None:
        return None

    async def ping(self) -> bool:
        return True


class RedisCache(Cache):
    """
    Redis failures degrade to cache misses: a request must not fail because the
    cache is down. Each failure is logged with the affected key.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> RedisCache:
        return cls(
            redis.from_url(
                url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=3,
            )
        )

    async def get_json(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(key)
        except RedisError as e:
            log.warning("cache_get_failed", key=key, error=str(e))
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            log.warning("cache_value_corrupt", key=key)
            return None

    async def set_json(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self._client.set(key, json.dumps(value), ex=ttl)
        except RedisError as e:
            log.warning("cache_set_failed", key=key, error=str(e))

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as e:
            log.warning("cache_delete_failed", key=key, error=str(e))

    async def delete_prefix(self, prefix: str) -> None:
        try:
            keys = [k async for k in self._client.scan_iter(match=f"{prefix}*")]
            if keys:
                await self._client.delete(*keys)
        except RedisError as e:
            log.warning("cache_delete_failed", key=f"{prefix}*", error=str(e))

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError) as e:
            log.warning("cache_ping_failed", error=str(e))
            return False

    async def close(self) -> None:
        await self._client.aclose()


# --- Module Notes -----------------------------------------------------------
# Key layout and TTLs are owned by the services using the cache (see
# `services.employees`).
