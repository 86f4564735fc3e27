"""Lookup/price cache"""
import json
from unittest.mock import AsyncMock

import pytest

from conftest import opensrs_reply
from opensrs_gateway.services.cache_service import (
    DomainCache,
    RedisDomainCache,
    TTLCache,
    create_domain_cache,
)


def test_entry_expires_after_ttl(clock):
    cache = TTLCache(300, clock)
    cache.set("example.com", {"available": True})

    clock.advance(299)
    assert cache.get("example.com") == {"available": True}

    clock.advance(2)
    assert cache.get("example.com") is None
    assert "example.com" not in cache
    assert (cache.hits, cache.misses) == (1, 1)


def test_sweep_drops_only_expired_entries(clock):
    cache = TTLCache(300, clock)
    cache.set("old.com", 1)
    clock.advance(200)
    cache.set("new.com", 2)
    clock.advance(150)

    assert cache.sweep() == 1
    assert len(cache) == 1
    assert cache.get("new.com") == 2


async def test_domain_cache_keys_are_case_insensitive(domain_cache):
    await domain_cache.set_lookup("Example.COM", {"success": True})

    assert await domain_cache.get_lookup("example.com") == {"success": True}
    assert await domain_cache.get_price("example.com") is None


async def test_domain_cache_stats_and_clear(domain_cache):
    await domain_cache.set_lookup("a.com", {})
    await domain_cache.set_price("a.com", {})
    await domain_cache.get_lookup("a.com")
    await domain_cache.get_lookup("b.com")

    stats = await domain_cache.stats()
    assert stats["backend"] == "memory"
    assert stats["lookup"] == {"size": 1, "hits": 1, "misses": 1}
    assert stats["price"]["size"] == 1

    await domain_cache.clear()
    assert (await domain_cache.stats())["lookup"]["size"] == 0


async def test_lookup_is_served_from_cache_until_ttl(opensrs_client, fake_opensrs, clock):
    fake_opensrs.reply("LOOKUP", opensrs_reply({"status": "available"}, response_code="210"))

    first = await opensrs_client.lookup_domain("example.com")
    clock.advance(4 * 60 + 59)
    second = await opensrs_client.lookup_domain("example.com")

    assert first.success and second.success
    assert second.response_code == "210"
    assert len(fake_opensrs.calls("LOOKUP")) == 1

    clock.advance(2)
    await opensrs_client.lookup_domain("example.com")
    assert len(fake_opensrs.calls("LOOKUP")) == 2


async def test_failed_lookup_is_not_cached(opensrs_client, fake_opensrs):
    fake_opensrs.reply("LOOKUP", opensrs_reply(response_code="465", response_text="Invalid", is_success=False))

    await opensrs_client.lookup_domain("example.com")
    await opensrs_client.lookup_domain("example.com")

    assert len(fake_opensrs.calls("LOOKUP")) == 2


async def test_price_with_custom_period_bypasses_cache(opensrs_client, fake_opensrs):
    fake_opensrs.reply("GET_PRICE", opensrs_reply({"price": "10.99"}))

    await opensrs_client.get_price("example.com")
    await opensrs_client.get_price("example.com")
    await opensrs_client.get_price("example.com", period=3)

    assert len(fake_opensrs.calls("GET_PRICE")) == 2


@pytest.fixture
def redis_stub():
    stub = AsyncMock()
    stub.get.return_value = None
    stub.keys.return_value = []
    return stub


async def test_redis_cache_stores_json_with_expiry(redis_stub):
    cache = RedisDomainCache(redis_stub, ttl_seconds=300)

    await cache.set_price("Example.com", {"price": "10.99"})

    redis_stub.setex.assert_awaited_once_with(
        "opensrs:price:example.com", 300, json.dumps({"price": "10.99"})
    )


async def test_redis_cache_reads_json(redis_stub):
    redis_stub.get.return_value = json.dumps({"success": True})
    cache = RedisDomainCache(redis_stub, ttl_seconds=300)

    assert await cache.get_lookup("example.com") == {"success": True}
    redis_stub.get.assert_awaited_once_with("opensrs:lookup:example.com")
    assert await cache.sweep() == 0


def test_memory_backend_is_configured_by_default():
    assert isinstance(create_domain_cache(), DomainCache)
