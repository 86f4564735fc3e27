"""Lookup and price cache

Two domain-keyed maps, one for LOOKUP results and one for GET_PRICE
results. Entries expire lazily on read and are also removed by a
periodic sweep. Values are plain JSON-compatible dicts so the in-memory
and Redis backends are interchangeable.
"""
import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from opensrs_gateway.core.config import settings
from opensrs_gateway.core.redis import RedisClient, redis_client

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    timestamp: float


class TTLCache:
    """Single map with a fixed time-to-live per entry"""

    def __init__(self, ttl_seconds: float, clock: Clock = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: Dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp >= self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            self.misses += 1
            return None
        if self._expired(entry, self._clock()):
            del self._store[key]
            self.misses += 1
            return None
        self.hits += 1
        return entry.data

    def set(self, key: str, data: Any):
        self._store[key] = CacheEntry(data=data, timestamp=self._clock())

    def sweep(self) -> int:
        """Remove every expired entry, returning how many were dropped"""
        now = self._clock()
        expired = [key for key, entry in self._store.items() if self._expired(entry, now)]
        for key in expired:
            del self._store[key]
        return len(expired)

    def clear(self):
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return key in self._store


def _key(domain: str) -> str:
    return domain.strip().lower()


class DomainCache:
    """In-process lookup/price cache"""

    backend = "memory"

    def __init__(self, ttl_seconds: float = 300, clock: Clock = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.lookups = TTLCache(ttl_seconds, clock)
        self.prices = TTLCache(ttl_seconds, clock)

    async def get_lookup(self, domain: str) -> Optional[Dict[str, Any]]:
        data = self.lookups.get(_key(domain))
        logger.debug("Lookup cache %s for %s", "hit" if data is not None else "miss", domain)
        return data

    async def set_lookup(self, domain: str, data: Dict[str, Any]):
        self.lookups.set(_key(domain), data)

    async def get_price(self, domain: str) -> Optional[Dict[str, Any]]:
        data = self.prices.get(_key(domain))
        logger.debug("Price cache %s for %s", "hit" if data is not None else "miss", domain)
        return data

    async def set_price(self, domain: str, data: Dict[str, Any]):
        self.prices.set(_key(domain), data)

    async def sweep(self) -> int:
        return self.lookups.sweep() + self.prices.sweep()

    async def clear(self):
        self.lookups.clear()
        self.prices.clear()
        logger.info("Domain cache cleared")

    async def stats(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "ttl_seconds": self.ttl_seconds,
            "lookup": {"size": len(self.lookups), "hits": self.lookups.hits, "misses": self.lookups.misses},
            "price": {"size": len(self.prices), "hits": self.prices.hits, "misses": self.prices.misses},
        }


class RedisDomainCache:
    """Lookup/price cache stored in the Redis cache database.

    Expiry is left to Redis, so ``sweep`` has nothing to do.
    """

    backend = "redis"
    prefix = "opensrs"

    def __init__(self, client: RedisClient = redis_client, ttl_seconds: int = 300):
        self.client = client
        self.ttl_seconds = int(ttl_seconds)
        self._counters = {"lookup": {"hits": 0, "misses": 0}, "price": {"hits": 0, "misses": 0}}

    def _redis_key(self, kind: str, domain: str) -> str:
        return f"{self.prefix}:{kind}:{_key(domain)}"

    async def _get(self, kind: str, domain: str) -> Optional[Dict[str, Any]]:
        raw = await self.client.get(self._redis_key(kind, domain))
        hit = raw is not None
        self._counters[kind]["hits" if hit else "misses"] += 1
        logger.debug("%s cache %s for %s", kind.capitalize(), "hit" if hit else "miss", domain)
        return json.loads(raw) if raw is not None else None

    async def _set(self, kind: str, domain: str, data: Dict[str, Any]):
        await self.client.setex(self._redis_key(kind, domain), self.ttl_seconds, json.dumps(data))

    async def get_lookup(self, domain: str) -> Optional[Dict[str, Any]]:
        return await self._get("lookup", domain)

    async def set_lookup(self, domain: str, data: Dict[str, Any]):
        await self._set("lookup", domain, data)

    async def get_price(self, domain: str) -> Optional[Dict[str, Any]]:
        return await self._get("price", domain)

    async def set_price(self, domain: str, data: Dict[str, Any]):
        await self._set("price", domain, data)

    async def sweep(self) -> int:
        return 0

    async def clear(self):
        keys = await self.client.keys(f"{self.prefix}:*")
        await self.client.delete(*keys)
        logger.info("Domain cache cleared (%d keys)", len(keys))

    async def stats(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = {"backend": self.backend, "ttl_seconds": self.ttl_seconds}
        for kind, counters in self._counters.items():
            keys = await self.client.keys(f"{self.prefix}:{kind}:*")
            stats[kind] = {"size": len(keys), **counters}
        return stats


def create_domain_cache():
    """Build the cache configured by ``CACHE_BACKEND``"""
    if settings.CACHE_BACKEND == "redis":
        return RedisDomainCache(redis_client, settings.CACHE_TTL_SECONDS)
    return DomainCache(settings.CACHE_TTL_SECONDS)


async def run_sweeper(cache, interval_seconds: float):
    """Sweep expired entries forever; cancel the task to stop it"""
    while True:
        await asyncio.sleep(interval_seconds)
        removed = await cache.sweep()
        if removed:
            logger.info("Cache sweep removed %d expired entries", removed)
