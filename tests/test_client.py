"""OpenSRS client over a mocked transport"""
import httpx

from conftest import opensrs_reply
from opensrs_gateway.opensrs.result import NETWORK_ERROR, TIMEOUT_ERROR
from opensrs_gateway.opensrs.transport import sign


async def test_request_is_signed(opensrs_client, fake_opensrs):
    fake_opensrs.reply("GET_BALANCE", opensrs_reply({"balance": "100.00"}, object_type="BALANCE"))

    result = await opensrs_client.get_balance()

    request = fake_opensrs.requests[0]
    assert result.success
    assert result.data["balance"] == "100.00"
    assert request["headers"]["x-username"] == "reseller"
    assert request["headers"]["x-signature"] == sign(request["xml"], "secret-key")
    assert request["headers"]["content-type"] == "text/xml"


async def test_network_error_becomes_result(opensrs_client, fake_opensrs):
    fake_opensrs.reply("LOOKUP", httpx.ConnectError("connection refused"))

    result = await opensrs_client.lookup_domain("example.com")

    assert not result.success
    assert result.response_code == NETWORK_ERROR
    assert "connection refused" in result.error
    assert result.is_local_failure


async def test_timeout_becomes_result(opensrs_client, fake_opensrs):
    fake_opensrs.reply("GET_DNS_ZONE", httpx.ReadTimeout("timed out"))

    result = await opensrs_client.get_dns_zone("example.com")

    assert not result.success
    assert result.response_code == TIMEOUT_ERROR


async def test_http_error_status_becomes_result(opensrs_client, fake_opensrs):
    fake_opensrs.reply("GET_PRICE", httpx.Response(503, text="Service Unavailable"))

    result = await opensrs_client.get_price("example.com")

    assert not result.success
    assert result.response_code == "503"
    assert result.http_status == 503
    assert result.is_local_failure


async def test_vendor_failure_keeps_vendor_code(opensrs_client, fake_opensrs):
    fake_opensrs.reply("GET", opensrs_reply(
        response_code="415", response_text="Authentication failed", is_success=False
    ))

    result = await opensrs_client.get_domain("example.com")

    assert not result.success
    assert result.response_code == "415"
    assert result.is_auth_failure
    assert not result.is_local_failure


async def test_bulk_lookup_keeps_input_order(opensrs_client, fake_opensrs):
    domains = [f"name{index}.com" for index in range(7)]
    fake_opensrs.reply("LOOKUP", opensrs_reply(response_code="210"))

    results = await opensrs_client.bulk_lookup(domains)

    assert [domain for domain, _ in results] == domains
    assert all(result.success for _, result in results)
    assert len(fake_opensrs.calls("LOOKUP")) == 7


async def test_register_uses_configured_profile_credentials(opensrs_client, fake_opensrs, contact):
    fake_opensrs.reply("SW_REGISTER", opensrs_reply({"id": "3735281"}))

    result = await opensrs_client.register_domain("example.com", {"registrant_contact": contact})

    attributes = fake_opensrs.calls("SW_REGISTER")[0]["attributes"]
    assert result.success
    assert attributes["reg_username"] == "reguser"
    assert attributes["reg_password"] == "regpass"


async def test_cancel_transfer_names_the_reseller(opensrs_client, fake_opensrs):
    fake_opensrs.reply("CANCEL_TRANSFER", opensrs_reply(object_type="TRANSFER"))

    await opensrs_client.cancel_transfer("example.com")

    request = fake_opensrs.calls("CANCEL_TRANSFER")[0]
    assert request["object"] == "TRANSFER"
    assert request["attributes"] == {"domain": "example.com", "reseller": "reseller"}


async def test_unparseable_reply_becomes_result(opensrs_client, fake_opensrs):
    fake_opensrs.reply("GET_BALANCE", httpx.Response(200, text="<html>maintenance</html>"))

    result = await opensrs_client.get_balance()

    assert not result.success
    assert result.response_code == "PARSE_ERROR"
