"""Request templates, one per OpenSRS command

Each function takes plain Python values and returns the XML document
ready to be signed and posted.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence

from opensrs_gateway.opensrs.contacts import build_contact_set
from opensrs_gateway.opensrs.envelope import build_envelope
from opensrs_gateway.opensrs.errors import OpenSRSError
from opensrs_gateway.opensrs.records import group_records, validate_records

DEFAULT_SUGGEST_SERVICES = ("lookup", "suggestion")
DEFAULT_SUGGEST_TLDS = (".com", ".net", ".org", ".co", ".info")

MODIFICATION_TYPES = (
    "nameserver_list",
    "contact_info",
    "auto_renew",
    "expire_action",
    "whois_privacy_state",
    "locking",
    "forwarding_email",
)


# Lookup and pricing

def lookup_domain(domain: str, no_cache: bool = True) -> str:
    return build_envelope("LOOKUP", "DOMAIN", {"domain": domain, "no_cache": no_cache})


def get_price(domain: str, period: Optional[int] = None) -> str:
    attributes: Dict[str, Any] = {"domain": domain}
    if period:
        attributes["period"] = period
    return build_envelope("GET_PRICE", "DOMAIN", attributes)


def name_suggest(
    search_string: str,
    services: Optional[Sequence[str]] = None,
    tlds: Optional[Sequence[str]] = None,
    languages: Optional[Sequence[str]] = None,
    max_wait_time: int = 30,
    search_key: Optional[str] = None,
) -> str:
    """NAME_SUGGEST with lookup and suggestion services by default"""
    attributes: Dict[str, Any] = {
        "searchstring": search_string,
        "services": list(services or DEFAULT_SUGGEST_SERVICES),
        "tlds": list(tlds or DEFAULT_SUGGEST_TLDS),
        "language_list": ",".join(languages or ["en"]),
        "max_wait_time": max_wait_time,
    }
    if search_key:
        attributes["search_key"] = search_key
    return build_envelope("NAME_SUGGEST", "DOMAIN", attributes)


# Domain lifecycle

def nameserver_list(nameservers: Iterable[str]) -> List[Dict[str, Any]]:
    return [
        {"name": name, "sortorder": index + 1}
        for index, name in enumerate(nameservers)
    ]


def register_domain(
    domain: str,
    contacts: Dict[str, Any],
    reg_username: str,
    reg_password: str,
    period: int = 1,
    nameservers: Optional[Sequence[str]] = None,
    auto_renew: bool = False,
    whois_privacy: bool = False,
    handle: str = "process",
    tld_data: Optional[Dict[str, Any]] = None,
    affiliate_id: Optional[str] = None,
) -> str:
    """SW_REGISTER for a new domain.

    Admin and billing contacts default to the registrant. Custom
    nameservers are sent only when some are given.
    """
    contact_set = build_contact_set(contacts)
    if "owner" not in contact_set:
        raise OpenSRSError("A registrant contact is required")

    attributes: Dict[str, Any] = {
        "reg_type": "new",
        "domain": domain,
        "period": int(period or 1),
        "handle": handle,
        "auto_renew": auto_renew,
        "f_whois_privacy": whois_privacy,
        "reg_username": reg_username,
        "reg_password": reg_password,
        "contact_set": contact_set,
    }
    if nameservers:
        attributes["custom_nameservers"] = 1
        attributes["nameserver_list"] = nameserver_list(nameservers)
    else:
        attributes["custom_nameservers"] = 0
    attributes["custom_tech_contact"] = 1 if "tech" in contact_set else 0
    if tld_data:
        attributes["tld_data"] = tld_data
    if affiliate_id:
        attributes["affiliate_id"] = affiliate_id

    return build_envelope("SW_REGISTER", "DOMAIN", attributes)


def renew_domain(
    domain: str,
    period: int = 1,
    current_expiration_year: Optional[int] = None,
    auto_renew: Optional[bool] = None,
) -> str:
    attributes: Dict[str, Any] = {"domain": domain, "period": int(period or 1), "handle": "process"}
    if current_expiration_year:
        attributes["currentexpirationyear"] = current_expiration_year
    if auto_renew is not None:
        attributes["auto_renew"] = auto_renew
    return build_envelope("RENEW", "DOMAIN", attributes)


def get_domain(domain: str, info_type: str = "all_info") -> str:
    return build_envelope("GET", "DOMAIN", {"domain": domain, "type": info_type})


def update_contacts(domain: str, contacts: Dict[str, Any]) -> str:
    """UPDATE_CONTACTS for every role present in ``contacts``"""
    contact_set = build_contact_set(contacts, fill_from_owner=False)
    if not contact_set:
        raise OpenSRSError("At least one contact is required")
    return build_envelope(
        "UPDATE_CONTACTS",
        "DOMAIN",
        {"domain": domain, "contact_set": contact_set, "types": list(contact_set)},
    )


def modify_domain(domain: str, modification_type: str, **attributes) -> str:
    """Dispatch a domain modification to the matching OpenSRS command.

    ``nameserver_list`` and ``contact_info`` have dedicated commands;
    every other type is a ``MODIFY`` with the ``data`` selector set.
    Unknown types pass their attributes through unchanged.
    """
    if modification_type == "nameserver_list":
        return advanced_update_nameservers(domain, attributes.get("nameservers") or [])
    if modification_type == "contact_info":
        return update_contacts(domain, attributes.get("contacts") or {})

    payload: Dict[str, Any] = {"domain": domain, "affect_domains": 0}
    if modification_type == "auto_renew":
        payload.update(data="expire_action", auto_renew=bool(attributes.get("auto_renew")), let_expire=False)
    elif modification_type == "expire_action":
        payload.update(
            data="expire_action",
            auto_renew=bool(attributes.get("auto_renew")),
            let_expire=bool(attributes.get("let_expire")),
        )
    elif modification_type == "whois_privacy_state":
        state = attributes.get("state")
        if isinstance(state, bool):
            state = "enable" if state else "disable"
        payload.update(data="whois_privacy_state", state=state)
    elif modification_type == "locking":
        payload.update(data="status", lock_state=bool(attributes.get("lock_state")))
    elif modification_type == "forwarding_email":
        payload.update(data="forwarding_email", forwarding_email=attributes.get("forwarding_email"))
    else:
        payload["data"] = modification_type
        payload.update(
            {key: value for key, value in attributes.items() if key not in ("nameservers", "contacts")}
        )
    return build_envelope("MODIFY", "DOMAIN", payload)


# DNS zones

def get_dns_zone(domain: str) -> str:
    return build_envelope("GET_DNS_ZONE", "DOMAIN", {"domain": domain})


def set_dns_zone(domain: str, records: List[Dict[str, Any]]) -> str:
    """SET_DNS_ZONE replacing the full record set of ``domain``"""
    grouped = group_records(validate_records(records))
    return build_envelope("SET_DNS_ZONE", "DOMAIN", {"domain": domain, "records": grouped})


def create_dns_zone(domain: str, records: Optional[List[Dict[str, Any]]] = None, dns_template: Optional[str] = None) -> str:
    attributes: Dict[str, Any] = {"domain": domain}
    if records:
        attributes["records"] = group_records(validate_records(records))
    if dns_template:
        attributes["dns_template"] = dns_template
    return build_envelope("CREATE_DNS_ZONE", "DOMAIN", attributes)


def delete_dns_zone(domain: str) -> str:
    return build_envelope("DELETE_DNS_ZONE", "DOMAIN", {"domain": domain})


def reset_dns_zone(domain: str, dns_template: Optional[str] = None) -> str:
    attributes: Dict[str, Any] = {"domain": domain}
    if dns_template:
        attributes["dns_template"] = dns_template
    return build_envelope("RESET_DNS_ZONE", "DOMAIN", attributes)


# Nameservers

def advanced_update_nameservers(domain: str, nameservers: Sequence[str], op_type: str = "assign") -> str:
    """Assign, add or remove the nameservers of a domain"""
    if op_type == "add":
        attributes: Dict[str, Any] = {"add_ns": list(nameservers), "op_type": "add_remove"}
    elif op_type == "remove":
        attributes = {"remove_ns": list(nameservers), "op_type": "add_remove"}
    else:
        attributes = {"assign_ns": list(nameservers), "op_type": "assign"}
    return build_envelope("ADVANCED_UPDATE_NAMESERVERS", "DOMAIN", attributes, domain=domain)


def create_nameserver(name: str, ip_address: str, domain: Optional[str] = None) -> str:
    attributes: Dict[str, Any] = {"name": name, "ipaddress": ip_address, "add_to_all_registry": 1}
    if domain:
        attributes["domain"] = domain
    return build_envelope("CREATE", "NAMESERVER", attributes)


def get_nameserver(name: str, domain: Optional[str] = None) -> str:
    attributes: Dict[str, Any] = {"name": name}
    if domain:
        attributes["domain"] = domain
    return build_envelope("GET", "NAMESERVER", attributes)


def modify_nameserver(name: str, ip_addresses: Sequence[str], new_name: Optional[str] = None) -> str:
    attributes: Dict[str, Any] = {
        "nameserver": name,
        "handle": "process",
        "ip_addresses": [{"ip_address": ip} for ip in ip_addresses],
    }
    if new_name:
        attributes["new_name"] = new_name
    return build_envelope("MODIFY", "NAMESERVER", attributes)


def delete_nameserver(name: str) -> str:
    return build_envelope("DELETE", "NAMESERVER", {"nameserver": name, "handle": "process"})


def registry_check_nameserver(name: str, tld: Optional[str] = None) -> str:
    attributes: Dict[str, Any] = {"nameserver": name}
    if tld:
        attributes["tld"] = tld
    return build_envelope("REGISTRY_CHECK_NAMESERVER", "NAMESERVER", attributes)


# Transfers

def check_transfer(domain: str, auth_info: Optional[str] = None) -> str:
    attributes: Dict[str, Any] = {"domain": domain, "check_status": 1, "get_request_address": 1}
    if auth_info:
        attributes["auth_info"] = auth_info
    return build_envelope("CHECK_TRANSFER", "DOMAIN", attributes)


def process_transfer(
    domain: str,
    auth_info: str,
    contacts: Dict[str, Any],
    reg_username: str,
    reg_password: str,
    nameservers: Optional[Sequence[str]] = None,
) -> str:
    """SW_REGISTER with ``reg_type=transfer``"""
    contact_set = build_contact_set(contacts)
    if "owner" not in contact_set:
        raise OpenSRSError("A registrant contact is required")

    attributes: Dict[str, Any] = {
        "reg_type": "transfer",
        "domain": domain,
        "auth_info": auth_info,
        "handle": "process",
        "period": 1,
        "reg_username": reg_username,
        "reg_password": reg_password,
        "contact_set": contact_set,
        "custom_tech_contact": 1 if "tech" in contact_set else 0,
    }
    if nameservers:
        attributes["custom_nameservers"] = 1
        attributes["nameserver_list"] = nameserver_list(nameservers)
    else:
        attributes["custom_nameservers"] = 0
    return build_envelope("SW_REGISTER", "DOMAIN", attributes)


def cancel_transfer(domain: str, reseller: str) -> str:
    return build_envelope("CANCEL_TRANSFER", "TRANSFER", {"domain": domain, "reseller": reseller})


def get_transfers_in(status: Optional[str] = None) -> str:
    attributes: Dict[str, Any] = {}
    if status:
        attributes["status"] = status
    return build_envelope("GET_TRANSFERS_IN", "DOMAIN", attributes)


def get_transfers_away(status: Optional[str] = None) -> str:
    attributes: Dict[str, Any] = {}
    if status:
        attributes["status"] = status
    return build_envelope("GET_TRANSFERS_AWAY", "DOMAIN", attributes)


# Account and reporting

def get_balance() -> str:
    return build_envelope("GET_BALANCE", "BALANCE", {})


def get_domains_by_expiredate(exp_from: str, exp_to: str, limit: int = 100, page: int = 1) -> str:
    return build_envelope(
        "GET_DOMAINS_BY_EXPIREDATE",
        "DOMAIN",
        {"exp_from": exp_from, "exp_to": exp_to, "limit": limit, "page": page},
    )


def get_orders_by_domain(domain: str) -> str:
    return build_envelope("GET_ORDERS_BY_DOMAIN", "DOMAIN", {"domain": domain})


def get_deleted_domains(del_from: Optional[str] = None, del_to: Optional[str] = None, limit: int = 100) -> str:
    attributes: Dict[str, Any] = {"limit": limit}
    if del_from:
        attributes["del_from"] = del_from
    if del_to:
        attributes["del_to"] = del_to
    return build_envelope("GET_DELETED_DOMAINS", "DOMAIN", attributes)
