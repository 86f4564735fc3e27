"""Request document building"""
import xml.etree.ElementTree as ET

import pytest

from opensrs_gateway.opensrs import templates
from opensrs_gateway.opensrs.contacts import build_contact_set, normalize_contact, normalize_phone
from opensrs_gateway.opensrs.envelope import build_envelope
from opensrs_gateway.opensrs.errors import ContactValidationError, OpenSRSError, RecordValidationError
from opensrs_gateway.opensrs.parser import decode_document


def test_envelope_header_and_outer_block():
    xml = build_envelope("LOOKUP", "DOMAIN", {"domain": "example.com"})

    assert xml.startswith("<?xml version='1.0' encoding='UTF-8' standalone='no' ?>")
    assert "<!DOCTYPE OPS_envelope SYSTEM 'ops.dtd'>" in xml
    assert "<version>0.9</version>" in xml

    block = decode_document(xml)
    assert block["protocol"] == "XCP"
    assert block["action"] == "LOOKUP"
    assert block["object"] == "DOMAIN"
    assert block["attributes"] == {"domain": "example.com"}


def test_scalars_lists_and_maps_are_encoded():
    xml = build_envelope("TEST", "DOMAIN", {
        "flag_on": True,
        "flag_off": False,
        "missing": None,
        "count": 3,
        "names": ["a", "b"],
        "nested": {"key": "value"},
    })
    attributes = decode_document(xml)["attributes"]

    assert attributes["flag_on"] == "1"
    assert attributes["flag_off"] == "0"
    assert attributes["missing"] == ""
    assert attributes["count"] == "3"
    assert attributes["names"] == ["a", "b"]
    assert attributes["nested"] == {"key": "value"}


def test_special_characters_are_escaped():
    xml = build_envelope("TEST", "DOMAIN", {"text": "v=spf1 <a> & \"b\""})

    assert "&lt;a&gt; &amp;" in xml
    assert decode_document(xml)["attributes"]["text"] == "v=spf1 <a> & \"b\""


def test_lookup_disables_registry_cache():
    attributes = decode_document(templates.lookup_domain("example.com"))["attributes"]
    assert attributes == {"domain": "example.com", "no_cache": "1"}


def test_get_price_sends_period_only_when_given():
    assert "period" not in decode_document(templates.get_price("example.com"))["attributes"]
    assert decode_document(templates.get_price("example.com", 2))["attributes"]["period"] == "2"


def test_name_suggest_defaults():
    attributes = decode_document(templates.name_suggest("coffee"))["attributes"]

    assert attributes["searchstring"] == "coffee"
    assert attributes["services"] == ["lookup", "suggestion"]
    assert attributes["tlds"] == [".com", ".net", ".org", ".co", ".info"]
    assert attributes["language_list"] == "en"
    assert attributes["max_wait_time"] == "30"


def test_set_dns_zone_groups_records_by_type():
    xml = templates.set_dns_zone("example.com", [
        {"type": "A", "subdomain": "www", "address": "192.0.2.10"},
        {"type": "MX", "subdomain": "", "address": "mail.example.com", "priority": 10},
        {"type": "TXT", "subdomain": "", "address": "v=spf1 -all"},
    ])

    assert '<item key="MX"><dt_array>' in xml
    assert '<item key="priority">10</item>' in xml

    records = decode_document(xml)["attributes"]["records"]
    assert records["A"] == [{"subdomain": "www", "ip_address": "192.0.2.10"}]
    assert records["MX"] == [{"subdomain": "", "priority": "10", "hostname": "mail.example.com"}]
    assert records["TXT"] == [{"subdomain": "", "text": "v=spf1 -all"}]


def test_srv_record_field_order():
    xml = templates.set_dns_zone("example.com", [
        {"type": "srv", "subdomain": "_sip._tcp", "address": "sip.example.com",
         "priority": 10, "weight": 5, "port": 5060},
    ])
    srv = ET.fromstring(xml.split("\n", 2)[2]).find(".//item[@key='SRV']/dt_array/item/dt_assoc")

    assert [item.get("key") for item in srv] == ["subdomain", "priority", "weight", "hostname", "port"]


@pytest.mark.parametrize("record, message", [
    ({"type": "MX", "address": "mail.example.com"}, "MX records require priority"),
    ({"type": "SRV", "address": "sip.example.com", "priority": 1, "port": 5060}, "SRV records require weight"),
    ({"type": "A"}, "Record must have type and address"),
    ({"type": "SPF", "address": "x"}, "Unsupported record type: SPF"),
])
def test_set_dns_zone_rejects_incomplete_records(record, message):
    with pytest.raises(RecordValidationError) as exc_info:
        templates.set_dns_zone("example.com", [record])
    assert message in exc_info.value.message


def test_register_domain_fills_admin_and_billing_from_owner(contact):
    xml = templates.register_domain(
        "example.com",
        {"registrant_contact": contact},
        reg_username="reguser",
        reg_password="regpass",
        period=2,
        nameservers=["ns1.example.net", "ns2.example.net"],
        auto_renew=True,
    )
    attributes = decode_document(xml)["attributes"]

    assert attributes["reg_type"] == "new"
    assert attributes["period"] == "2"
    assert attributes["auto_renew"] == "1"
    assert attributes["f_whois_privacy"] == "0"
    assert attributes["custom_nameservers"] == "1"
    assert attributes["custom_tech_contact"] == "0"
    assert attributes["nameserver_list"] == [
        {"name": "ns1.example.net", "sortorder": "1"},
        {"name": "ns2.example.net", "sortorder": "2"},
    ]
    contact_set = attributes["contact_set"]
    assert set(contact_set) == {"owner", "admin", "billing"}
    assert contact_set["admin"] == contact_set["owner"]
    assert contact_set["owner"]["phone"] == "+1.4165550123"
    assert contact_set["owner"]["country"] == "GB"


def test_register_domain_requires_registrant():
    with pytest.raises(OpenSRSError):
        templates.register_domain("example.com", {}, reg_username="u", reg_password="p")


def test_register_domain_rejects_incomplete_registrant(contact):
    del contact["email"]
    with pytest.raises(ContactValidationError) as exc_info:
        templates.register_domain(
            "example.com", {"registrant_contact": contact}, reg_username="u", reg_password="p"
        )
    assert exc_info.value.details["missing"] == ["email"]


def test_update_contacts_lists_types(contact):
    attributes = decode_document(
        templates.update_contacts("example.com", {"tech_contact": contact})
    )["attributes"]

    assert attributes["types"] == ["tech"]
    assert list(attributes["contact_set"]) == ["tech"]


@pytest.mark.parametrize("op_type, key, sent_op_type", [
    ("assign", "assign_ns", "assign"),
    ("add", "add_ns", "add_remove"),
    ("remove", "remove_ns", "add_remove"),
])
def test_advanced_update_nameservers(op_type, key, sent_op_type):
    block = decode_document(
        templates.advanced_update_nameservers("example.com", ["ns1.example.net"], op_type)
    )

    assert block["domain"] == "example.com"
    assert block["attributes"] == {key: ["ns1.example.net"], "op_type": sent_op_type}


def test_modify_domain_dispatch():
    auto_renew = decode_document(templates.modify_domain("example.com", "auto_renew", auto_renew=True))
    assert auto_renew["action"] == "MODIFY"
    assert auto_renew["attributes"]["data"] == "expire_action"
    assert auto_renew["attributes"]["auto_renew"] == "1"

    privacy = decode_document(templates.modify_domain("example.com", "whois_privacy_state", state=False))
    assert privacy["attributes"]["state"] == "disable"

    locking = decode_document(templates.modify_domain("example.com", "locking", lock_state=True))
    assert locking["attributes"]["data"] == "status"
    assert locking["attributes"]["lock_state"] == "1"

    nameservers = decode_document(
        templates.modify_domain("example.com", "nameserver_list", nameservers=["ns1.example.net"])
    )
    assert nameservers["action"] == "ADVANCED_UPDATE_NAMESERVERS"


def test_normalize_phone():
    assert normalize_phone("+1 (416) 555-0123") == "+1.4165550123"
    assert normalize_phone("+44 20 7946 0958") == "+442079460958"
    assert normalize_phone(None) is None


def test_normalize_contact_accepts_camel_case(contact):
    camel = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "postalCode": "SW1Y 4JH",
        **{key: contact[key] for key in ("address1", "city", "state", "country", "phone", "email")},
    }
    normalized = normalize_contact(camel, strict=True)

    assert normalized["first_name"] == "Ada"
    assert normalized["postal_code"] == "SW1Y 4JH"
    assert normalized["state"] == "LDN"


def test_build_contact_set_ignores_unknown_roles(contact):
    contact_set = build_contact_set({"owner": contact, "reseller_contact": contact}, fill_from_owner=False)
    assert list(contact_set) == ["owner"]
