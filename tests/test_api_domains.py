"""Domain, pricing and transfer endpoints"""
import httpx
import pytest_asyncio

from conftest import opensrs_reply
from opensrs_gateway.schemas.user import UserCreate
from opensrs_gateway.services.user_service import UserService


@pytest_asyncio.fixture
async def owner(db_session):
    user = await UserService(db_session).create(UserCreate(
        username="ada",
        email="ada@analytical-engines.co.uk",
        first_name="Ada",
        last_name="Lovelace",
        password="difference-engine",
    ))
    await db_session.commit()
    return user


async def test_lookup_available(http_client, fake_opensrs):
    fake_opensrs.reply("LOOKUP", opensrs_reply({"status": "available"}, response_code="210"))

    response = await http_client.post("/api/domains/lookup", json={"domain": "Example.com"})

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["available"] is True
    assert body["domain"] == "example.com"
    assert body["responseCode"] == "210"
    assert fake_opensrs.calls("LOOKUP")[0]["attributes"]["domain"] == "example.com"


async def test_lookup_taken(http_client, fake_opensrs):
    fake_opensrs.reply("LOOKUP", opensrs_reply({"status": "taken"}, response_code="211"))

    body = (await http_client.post("/api/domains/lookup", json={"domain": "example.com"})).json()

    assert body["success"] is True
    assert body["available"] is False


async def test_lookup_network_failure_is_500(http_client, fake_opensrs):
    fake_opensrs.reply("LOOKUP", httpx.ConnectError("connection refused"))

    response = await http_client.post("/api/domains/lookup", json={"domain": "example.com"})

    body = response.json()
    assert response.status_code == 500
    assert body["success"] is False
    assert body["responseCode"] == "NETWORK_ERROR"


async def test_invalid_domain_is_rejected(http_client, fake_opensrs):
    response = await http_client.post("/api/domains/lookup", json={"domain": "not a domain"})

    body = response.json()
    assert response.status_code == 400
    assert body["success"] is False
    assert body["error"] == "Validation failed"
    assert body["details"][0]["loc"] == ["body", "domain"]
    assert fake_opensrs.requests == []


async def test_bulk_lookup_summary(http_client, fake_opensrs):
    fake_opensrs.reply(
        "LOOKUP",
        opensrs_reply(response_code="210"),
        opensrs_reply(response_code="211"),
    )

    body = (await http_client.post(
        "/api/domains/bulk-lookup", json={"domains": ["one.com", "two.com"]}
    )).json()

    assert [item["domain"] for item in body["results"]] == ["one.com", "two.com"]
    assert body["summary"] == {"total": 2, "available": 1, "taken": 1, "failed": 0}
    assert body["truncated"] is False


async def test_bulk_lookup_counts_failures_apart_from_taken(http_client, fake_opensrs):
    fake_opensrs.reply(
        "LOOKUP",
        opensrs_reply(response_code="210"),
        httpx.ConnectError("connection refused"),
        opensrs_reply(response_code="211"),
    )

    body = (await http_client.post(
        "/api/domains/bulk-lookup", json={"domains": ["one.com", "two.com", "three.com"]}
    )).json()

    failed = body["results"][1]
    assert failed["domain"] == "two.com"
    assert failed["success"] is False
    assert failed["available"] is False
    assert failed["responseCode"] == "NETWORK_ERROR"
    assert [item["success"] for item in body["results"]] == [True, False, True]
    assert body["summary"] == {"total": 3, "available": 1, "taken": 1, "failed": 1}


async def test_bulk_price_is_capped(http_client, fake_opensrs):
    fake_opensrs.reply("GET_PRICE", opensrs_reply({"price": "10.99"}))
    domains = [f"name{index}.com" for index in range(25)]

    body = (await http_client.post("/api/pricing/bulk", json={"domains": domains})).json()

    assert body["total"] == 20
    assert body["successful"] == 20
    assert body["truncated"] is True
    assert body["results"][0] == {
        "domain": "name0.com", "success": True, "price": "10.99", "currency": "USD", "error": None,
    }


async def test_vendor_auth_failure_is_403(http_client, fake_opensrs):
    fake_opensrs.reply("GET", opensrs_reply(
        response_code="415", response_text="Authentication failed", is_success=False
    ))

    response = await http_client.get("/api/domains/example.com")

    body = response.json()
    assert response.status_code == 403
    assert body["responseCode"] == "415"
    assert body["message"] == "Failed to get domain information"


async def test_register_mirrors_domain(http_client, fake_opensrs, owner, contact):
    fake_opensrs.reply("SW_REGISTER", opensrs_reply({"id": "3735281"}))

    response = await http_client.post("/api/domains/register", json={
        "domain": "analytical-engines.com",
        "period": 2,
        "registrant_contact": contact,
        "nameservers": ["ns1.example.net", "ns2.example.net"],
        "user_id": owner.id,
        "price": 21.98,
    })

    body = response.json()
    assert response.status_code == 200
    assert body["orderId"] == "3735281"
    assert body["localDomainId"] is not None

    mirrored = (await http_client.get(f"/api/domain/{body['localDomainId']}")).json()["data"]
    assert mirrored["domain_name"] == "analytical-engines.com"
    assert mirrored["owner_id"] == owner.id
    assert mirrored["registration_period"] == 2
    assert mirrored["nameservers"] == [{"name": "ns1.example.net"}, {"name": "ns2.example.net"}]


async def test_register_again_after_soft_removal(http_client, fake_opensrs, owner, contact):
    fake_opensrs.reply(
        "SW_REGISTER",
        opensrs_reply({"id": "3735281"}),
        opensrs_reply({"id": "3735399"}),
    )
    payload = {
        "domain": "analytical-engines.com",
        "registrant_contact": contact,
        "user_id": owner.id,
    }

    first = (await http_client.post("/api/domains/register", json=payload)).json()
    await http_client.delete(f"/api/domain/{first['localDomainId']}")

    response = await http_client.post("/api/domains/register", json=dict(payload, period=3))

    body = response.json()
    assert response.status_code == 200
    assert body["orderId"] == "3735399"
    assert body["localDomainId"] == first["localDomainId"]

    mirrored = (await http_client.get(f"/api/domain/{body['localDomainId']}")).json()["data"]
    assert mirrored["status"] == "active"
    assert mirrored["removed_at"] is None
    assert mirrored["registration_period"] == 3
    assert mirrored["opensrs_data"]["order_id"] == "3735399"


async def test_register_for_unknown_user(http_client, fake_opensrs, contact):
    response = await http_client.post("/api/domains/register", json={
        "domain": "analytical-engines.com",
        "registrant_contact": contact,
        "user_id": 999,
    })

    assert response.status_code == 404
    assert fake_opensrs.calls("SW_REGISTER") == []


async def test_register_rejected_by_registry(http_client, fake_opensrs, contact):
    fake_opensrs.reply("SW_REGISTER", opensrs_reply(
        response_code="485", response_text="Domain taken", is_success=False
    ))

    response = await http_client.post("/api/domains/register", json={
        "domain": "analytical-engines.com",
        "registrant_contact": contact,
    })

    assert response.status_code == 400
    assert response.json()["responseCode"] == "485"


async def test_modify_stops_at_first_rejection(http_client, fake_opensrs):
    fake_opensrs.reply("ADVANCED_UPDATE_NAMESERVERS", opensrs_reply())
    fake_opensrs.reply("MODIFY", opensrs_reply(
        response_code="465", response_text="Invalid", is_success=False
    ))

    response = await http_client.put("/api/domains/example.com", json={
        "nameservers": ["ns1.example.net"],
        "auto_renew": True,
        "lock_state": True,
    })

    body = response.json()
    assert response.status_code == 400
    assert body["applied"] == ["nameserver_list"]
    assert len(fake_opensrs.calls("MODIFY")) == 1


async def test_domain_list_window(http_client, fake_opensrs):
    fake_opensrs.reply("GET_DOMAINS_BY_EXPIREDATE", opensrs_reply({"exp_domains": [
        {"name": "zeta.com", "expiredate": "2027-01-01 00:00:00", "f_auto_renew": "1"},
        {"name": "alpha.org", "expiredate": "2026-12-01 00:00:00", "f_auto_renew": "0"},
    ]}))

    body = (await http_client.get(
        "/api/domains", params={"startDate": "2026-01-01", "endDate": "2027-12-31"}
    )).json()

    assert [domain["domain"] for domain in body["data"]] == ["alpha.org", "zeta.com"]
    assert body["data"][1]["auto_renew"] is True
    assert body["data"][1]["tld"] == "com"
    attributes = fake_opensrs.calls("GET_DOMAINS_BY_EXPIREDATE")[0]["attributes"]
    assert (attributes["exp_from"], attributes["exp_to"]) == ("2026-01-01", "2027-12-31")


async def test_transfer_check(http_client, fake_opensrs):
    fake_opensrs.reply("CHECK_TRANSFER", opensrs_reply({"transferrable": "1"}))

    body = (await http_client.post(
        "/api/transfers/check", json={"domain": "example.com", "auth_info": "secret"}
    )).json()

    assert body["success"] is True
    assert body["transferrable"] is True


async def test_opensrs_routes_fail_without_configuration(http_client, app):
    app.state.opensrs_client = None

    response = await http_client.get("/api/account/balance")

    assert response.status_code == 500
    assert response.json()["success"] is False
