"""
Key/value cache gateways used to deduplicate competitor scraping.
"""

from __future__ import annotations

import time
from typing import Protocol

from redis import asyncio as redis_asyncio
from redis.exceptions import RedisError

from app.config import CacheSettings


class CacheUnavailableError(RuntimeError):
    """
    Raised when the backing cache store cannot be reached.
    """


class CacheGateway(Protocol):
    async def get(self, key: str) -> str | None:
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    async def close(self) -> None:
        ...


class RedisCacheGateway:
    """
    Cache gateway backed by Redis string keys with expiry.
    """

    def __init__(self, client: redis_asyncio.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheGateway":
        return cls(redis_asyncio.Redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> str | None:
        try:
            value = await self._client.get(key)
        except RedisError as exc:
            raise CacheUnavailableError(f"Cache read failed for key={key}: {exc}") from exc
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as exc:
            raise CacheUnavailableError(f"Cache write failed for key={key}: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()


class InMemoryCacheGateway:
    """
    Process-local cache gateway with per-key expiry.

    Suitable for single-process development runs and tests.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, float]] = {}

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if time.monotonic() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, time.monotonic() + ttl_seconds)

    async def close(self) -> None:
        self._entries.clear()


def competitor_cache_key(identifier: str) -> str:
    return f"competitor:{identifier}"


def build_cache_gateway(settings: CacheSettings) -> CacheGateway:
    """
    Instantiate the gateway named by ``CACHE_BACKEND``.
    """

    if settings.backend == "memory":
        return InMemoryCacheGateway()
    if settings.backend == "redis":
        return RedisCacheGateway.from_url(settings.redis_url)
    raise ValueError(f"Unknown cache backend {settings.backend!r}.")
