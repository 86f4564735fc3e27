"""DNS record conversion between the API shape and the OpenSRS zone shape

The API works with a flat list of records::

    {"type": "MX", "subdomain": "", "address": "mail.example.com", "ttl": 3600, "priority": 10}

OpenSRS groups records by type and names the value field per type::

    records => {"MX": [{"subdomain": "", "hostname": "mail.example.com", "priority": "10"}]}
"""
from typing import Any, Dict, List, Optional

from opensrs_gateway.opensrs.errors import RecordValidationError

RECORD_TYPES = ("A", "AAAA", "CNAME", "MX", "TXT", "SRV", "NS", "PTR")
DEFAULT_TTL = 3600

# Wire field holding the record value for each type
ADDRESS_FIELDS = {
    "A": "ip_address",
    "AAAA": "ipv6_address",
    "CNAME": "hostname",
    "MX": "hostname",
    "TXT": "text",
    "SRV": "hostname",
}
_NUMERIC_FIELDS = ("priority", "weight", "port", "ttl")


def validate_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Check a single record and return a normalized copy.

    Raises RecordValidationError for a missing type or address, an
    unknown type, MX/SRV without priority or SRV without weight/port.
    """
    if not isinstance(record, dict):
        raise RecordValidationError("Record must be an object", record=record)

    record_type = str(record.get("type") or "").strip().upper()
    if not record_type:
        raise RecordValidationError("Record must have type and address", record=record)
    if record_type not in RECORD_TYPES:
        raise RecordValidationError(f"Unsupported record type: {record_type}", record=record)

    address = record.get("address")
    if address is None or str(address).strip() == "":
        raise RecordValidationError("Record must have type and address", record=record)

    normalized = dict(record)
    normalized["type"] = record_type
    normalized["subdomain"] = str(record.get("subdomain") or "")
    normalized["address"] = str(address).strip()

    for field in _NUMERIC_FIELDS:
        value = normalized.get(field)
        if value is None or value == "":
            normalized.pop(field, None)
            continue
        try:
            normalized[field] = int(value)
        except (TypeError, ValueError):
            raise RecordValidationError(f"Record {field} must be an integer", record=record)

    if record_type in ("MX", "SRV") and "priority" not in normalized:
        raise RecordValidationError(f"{record_type} records require priority", record=record)
    if record_type == "SRV":
        missing = [f for f in ("weight", "port") if f not in normalized]
        if missing:
            raise RecordValidationError(
                f"SRV records require {' and '.join(missing)}", record=record
            )

    return normalized


def validate_records(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Validate every record of a zone"""
    return [validate_record(record) for record in records]


def to_wire_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Map one validated record to its OpenSRS field layout"""
    record_type = record["type"]
    wire: Dict[str, Any] = {"subdomain": record.get("subdomain", "")}

    if record_type in ("MX", "SRV"):
        wire["priority"] = record["priority"]
    if record_type == "SRV":
        wire["weight"] = record["weight"]

    wire[ADDRESS_FIELDS.get(record_type, "address")] = record["address"]

    if record_type == "SRV":
        wire["port"] = record["port"]
    return wire


def group_records(records: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Group validated records by type, in wire format, keeping input order"""
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for record in records:
        grouped.setdefault(record["type"], []).append(to_wire_record(record))
    return grouped


def _to_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def from_wire_record(record_type: str, wire: Dict[str, Any]) -> Dict[str, Any]:
    """Map one OpenSRS record back to the API shape, injecting its type"""
    record_type = record_type.upper()
    field = ADDRESS_FIELDS.get(record_type, "address")
    address = wire.get(field)
    if address is None:
        # Some zones come back with the generic field name
        address = wire.get("address") or wire.get("hostname") or wire.get("ip_address") or ""

    record: Dict[str, Any] = {
        "type": record_type,
        "subdomain": wire.get("subdomain") or "",
        "address": address,
    }
    for numeric in _NUMERIC_FIELDS:
        value = _to_int(wire.get(numeric))
        if value is not None:
            record[numeric] = value
    return record


def flatten_records(grouped: Any) -> List[Dict[str, Any]]:
    """Flatten ``{TYPE: [records]}`` into a single list with ``type`` set"""
    if not isinstance(grouped, dict):
        return []

    flattened = []
    for record_type, entries in grouped.items():
        if isinstance(entries, dict):
            entries = [entries]
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if isinstance(entry, dict):
                flattened.append(from_wire_record(record_type, entry))
    return flattened


def records_match(existing: Dict[str, Any], criteria: Dict[str, Any]) -> bool:
    """Match by type and subdomain, plus address when the criteria carry one"""
    if str(existing.get("type", "")).upper() != str(criteria.get("type", "")).upper():
        return False
    if (existing.get("subdomain") or "") != (criteria.get("subdomain") or ""):
        return False
    address = criteria.get("address")
    if address:
        return existing.get("address") == address
    return True
