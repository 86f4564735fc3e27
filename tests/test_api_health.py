"""Health, suggestions and cache endpoints"""
import httpx

from conftest import opensrs_reply


async def test_health(http_client):
    body = (await http_client.get("/api/health")).json()

    assert body["status"] == "healthy"
    assert body["opensrs"]["configured"] is True
    assert body["opensrs"]["host"] == "https://opensrs.test:55443"


async def test_connectivity_reports_network_failure(http_client, fake_opensrs):
    fake_opensrs.reply("GET_BALANCE", httpx.ConnectError("no route to host"))

    response = await http_client.get("/api/health/connectivity")

    assert response.status_code == 500
    assert response.json()["responseCode"] == "NETWORK_ERROR"


async def test_suggestions_fill_missing_sections(http_client, fake_opensrs):
    fake_opensrs.reply("NAME_SUGGEST", opensrs_reply({
        "is_search_completed": "1",
        "suggestion": {"items": [{"domain": "morecoffee.net", "status": "available"}]},
    }))

    response = await http_client.post("/api/suggestions", json={"searchString": "coffee"})

    data = response.json()["data"]
    assert data["suggestions"]["items"][0]["available"] is True
    assert data["lookups"] == {"count": 0, "items": []}
    assert data["is_search_completed"] is True
    assert fake_opensrs.calls("NAME_SUGGEST")[0]["attributes"]["searchstring"] == "coffee"


async def test_cache_stats_follow_lookups(http_client, fake_opensrs):
    fake_opensrs.reply("LOOKUP", opensrs_reply(response_code="210"))

    await http_client.post("/api/domains/lookup", json={"domain": "example.com"})
    await http_client.post("/api/domains/lookup", json={"domain": "example.com"})

    stats = (await http_client.get("/api/cache/stats")).json()["data"]
    assert stats["lookup"] == {"size": 1, "hits": 1, "misses": 1}
    assert len(fake_opensrs.calls("LOOKUP")) == 1


async def test_clearing_cache_requires_token(http_client):
    response = await http_client.delete("/api/cache")

    assert response.status_code in (401, 403)
    assert response.json()["success"] is False
