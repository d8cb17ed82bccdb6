"""Redis implementation of the cache backing store."""

from typing import List, Optional

import redis.asyncio as redis

from i18n_runtime.caching.base import CacheBackingStore
from i18n_runtime.logging import get_module_logger

logger = get_module_logger()


class RedisBackingStore(CacheBackingStore):
    """Adapts an asyncio Redis client to ``CacheBackingStore``.

    Errors from the client propagate; ``ExternalCache`` absorbs them.
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisBackingStore":
        """Create a pooled store from a connection URL.

        Args:
            url: Redis URL (e.g. ``redis://localhost:6379/0``).

        Returns:
            RedisBackingStore using a shared connection pool.
        """
        pool = redis.ConnectionPool.from_url(
            url,
            decode_responses=True,
            max_connections=10,
            socket_timeout=5,
            socket_connect_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        logger.info("redis_connection_pool_created")
        return cls(redis.Redis(connection_pool=pool))

    async def get(self, key: str) -> Optional[str]:
        value = await self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        await self.client.set(key, value, ex=ttl_seconds)

    async def delete(self, *keys: str) -> None:
        if keys:
            await self.client.delete(*keys)

    async def keys(self, pattern: str) -> List[str]:
        found = []
        async for key in self.client.scan_iter(match=pattern):
            found.append(key.decode("utf-8") if isinstance(key, bytes) else key)
        return found

    async def close(self) -> None:
        await self.client.aclose()
        await self.client.connection_pool.disconnect()
