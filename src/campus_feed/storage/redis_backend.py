"""Storage gateway backed by Redis."""

from __future__ import annotations

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from campus_feed.core.errors import PersistenceError

from .base import StorageGateway

__all__ = ["RedisStorage"]


class RedisStorage(StorageGateway):
    """Stores each key as a plain Redis string under a namespace prefix."""

    def __init__(
        self,
        url: str,
        namespace: str = "campus_feed",
        client: aioredis.Redis | None = None,
    ) -> None:
        self.namespace = namespace
        self._redis = client or aioredis.from_url(url, decode_responses=True)

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> str | None:
        try:
            value = await self._redis.get(self._key(key))
        except RedisError as exc:
            raise PersistenceError(f"Redis read of {key!r} failed: {exc}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            await self._redis.set(self._key(key), value)
        except RedisError as exc:
            raise PersistenceError(f"Redis write of {key!r} failed: {exc}") from exc

    async def remove(self, key: str) -> None:
        try:
            await self._redis.delete(self._key(key))
        except RedisError as exc:
            raise PersistenceError(f"Redis removal of {key!r} failed: {exc}") from exc

    async def close(self) -> None:
        await self._redis.aclose()
