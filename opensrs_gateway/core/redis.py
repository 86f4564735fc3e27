"""Redis connection and utilities"""
from typing import Optional
import redis.asyncio as aioredis
from opensrs_gateway.core.config import settings


class RedisClient:
    """Redis client wrapper

    Only the cache database is used by the gateway: it backs the
    lookup/price cache when ``CACHE_BACKEND=redis``.
    """

    def __init__(self):
        self.cache_redis: Optional[aioredis.Redis] = None

    async def connect(self):
        """Connect to the Redis cache database"""
        self.cache_redis = await aioredis.from_url(
            settings.REDIS_URL.replace("/0", f"/{settings.REDIS_CACHE_DB}"),
            encoding="utf-8",
            decode_responses=True
        )

    async def disconnect(self):
        """Disconnect from Redis"""
        if self.cache_redis:
            await self.cache_redis.close()
            self.cache_redis = None

    @property
    def connected(self) -> bool:
        return self.cache_redis is not None

    async def get(self, key: str) -> Optional[str]:
        """Get value from Redis"""
        if not self.cache_redis:
            return None
        return await self.cache_redis.get(key)

    async def setex(self, key: str, time: int, value: str):
        """Set value in Redis with expiration"""
        if not self.cache_redis:
            return
        await self.cache_redis.set(key, value, ex=time)

    async def delete(self, *keys: str):
        """Delete keys from Redis"""
        if not self.cache_redis or not keys:
            return
        await self.cache_redis.delete(*keys)

    async def keys(self, pattern: str) -> list:
        """List keys matching a pattern"""
        if not self.cache_redis:
            return []
        return [key async for key in self.cache_redis.scan_iter(match=pattern)]


redis_client = RedisClient()
