"""Response parsing"""
import pytest

from conftest import opensrs_reply, zone_reply
from opensrs_gateway.opensrs import templates
from opensrs_gateway.opensrs.parser import (
    decode_document,
    lookup_availability,
    parse_response,
    records_of,
)
from opensrs_gateway.opensrs.result import PARSE_ERROR, OpenSRSResult


def test_zone_round_trip_keeps_type_specific_fields():
    records = [
        {"type": "A", "subdomain": "www", "address": "192.0.2.10"},
        {"type": "AAAA", "subdomain": "", "address": "2001:db8::1"},
        {"type": "MX", "subdomain": "", "address": "mail.example.com", "priority": 10},
        {"type": "SRV", "subdomain": "_sip._tcp", "address": "sip.example.com",
         "priority": 20, "weight": 5, "port": 5060},
    ]
    sent = decode_document(templates.set_dns_zone("example.com", records))["attributes"]["records"]

    result = parse_response(zone_reply(sent))

    assert result.success
    assert records_of(result) == records


def test_success_follows_is_success_flag():
    result = parse_response(opensrs_reply(response_code="200", is_success=False, response_text="Denied"))

    assert not result.success
    assert result.is_success == 0
    assert result.error == "Denied"


def test_success_falls_back_to_response_code():
    xml = opensrs_reply(response_code="210").replace('<item key="is_success">1</item>', "")

    result = parse_response(xml)

    assert result.is_success is None
    assert result.success


def test_price_falls_back_to_cost_and_defaults_currency():
    result = parse_response(opensrs_reply({"cost": "12.50"}))

    assert result.data["price"] == "12.50"
    assert result.data["currency"] == "USD"


def test_malformed_xml_is_a_parse_error():
    result = parse_response("<OPS_envelope><body>")

    assert not result.success
    assert result.response_code == PARSE_ERROR
    assert result.is_local_failure


def test_missing_data_block_is_a_parse_error():
    result = parse_response("<OPS_envelope><body/></OPS_envelope>")

    assert result.response_code == PARSE_ERROR


def test_name_suggest_sections():
    result = parse_response(opensrs_reply({
        "is_search_completed": "1",
        "request_response_time": "0.4",
        "lookup": {
            "count": "2",
            "items": [
                {"domain": "coffee.com", "status": "taken"},
                {"domain": "coffee.io", "status": "available", "price": "39.00"},
            ],
        },
        "suggestion": {"items": [{"domain": "morecoffee.net", "status": "available"}]},
    }))

    assert result.is_search_completed is True
    assert result.response_time == "0.4"
    assert result.lookups == {
        "count": 2,
        "items": [
            {"domain": "coffee.com", "status": "taken", "available": False},
            {"domain": "coffee.io", "status": "available", "available": True, "price": "39.00"},
        ],
    }
    assert result.suggestions["count"] == 1
    assert result.premium is None


@pytest.mark.parametrize("code, text, status, success, expected", [
    ("210", "Domain available", None, True, True),
    ("211", "Domain taken", None, True, False),
    ("200", "Command completed", "available", True, True),
    ("200", "Command completed", "taken", True, False),
    ("200", "Command completed", None, True, True),
    ("465", "Invalid domain", None, False, False),
])
def test_lookup_availability(code, text, status, success, expected):
    result = OpenSRSResult(
        success=success,
        response_code=code,
        response_text=text,
        data={"status": status} if status else {},
    )
    assert lookup_availability(result)[0] is expected


def test_lookup_text_checks_not_available_first():
    result = OpenSRSResult(success=True, response_code="201", response_text="Domain not available")
    assert lookup_availability(result) == (False, "Domain is taken")
