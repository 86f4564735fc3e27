"""OPS_envelope response parsing

The XML is decoded into plain dicts and lists first, then mapped onto an
``OpenSRSResult``. Malformed documents become a ``PARSE_ERROR`` result.
"""
import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Tuple

from opensrs_gateway.opensrs.records import flatten_records
from opensrs_gateway.opensrs.result import PARSE_ERROR, OpenSRSResult

logger = logging.getLogger(__name__)

_DOCTYPE_RE = re.compile(r"<!DOCTYPE[^>]*>", re.IGNORECASE)
SUCCESS_CODES = {"200", "210"}
SERVICE_SECTIONS = {
    "suggestion": "suggestions",
    "lookup": "lookups",
    "premium": "premium",
    "personal_names": "personal_names",
}


def decode_element(element: ET.Element) -> Any:
    """Decode a ``dt_assoc`` / ``dt_array`` tree into dicts and lists"""
    if element.tag == "dt_assoc":
        return {item.get("key"): decode_item(item) for item in element.findall("item")}
    if element.tag == "dt_array":
        items = sorted(element.findall("item"), key=lambda item: _array_index(item.get("key")))
        return [decode_item(item) for item in items]
    return (element.text or "").strip()


def _array_index(key: Optional[str]) -> int:
    try:
        return int(key)
    except (TypeError, ValueError):
        return 0


def decode_item(item: ET.Element) -> Any:
    for child in item:
        if child.tag in ("dt_assoc", "dt_array"):
            return decode_element(child)
    return (item.text or "").strip()


def decode_document(xml: str) -> Dict[str, Any]:
    """Return the outer data block of a response as a dict"""
    root = ET.fromstring(_DOCTYPE_RE.sub("", xml).strip().encode("utf-8"))
    block = root.find("./body/data_block/dt_assoc")
    if block is None:
        raise ValueError("Response has no body/data_block/dt_assoc")
    return decode_element(block)


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _truthy(value: Any) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes")


def resolve_price(attributes: Dict[str, Any]) -> Optional[str]:
    """Price from ``price``, then ``cost``, then ``amount``"""
    for key in ("price", "cost", "amount"):
        value = attributes.get(key)
        if value not in (None, "") and not isinstance(value, (dict, list)):
            return value
    return None


def parse_service_section(section: Any) -> Dict[str, Any]:
    """Map a name_suggest service block to ``{count, items}``"""
    if not isinstance(section, dict):
        return {"count": 0, "items": []}

    raw_items = section.get("items") or []
    if isinstance(raw_items, dict):
        raw_items = list(raw_items.values())

    items = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            continue
        status = raw.get("status") or ""
        item: Dict[str, Any] = {
            "domain": raw.get("domain") or "",
            "status": status,
            "available": status.lower() == "available",
        }
        price = resolve_price(raw)
        if price is not None:
            item["price"] = price
        items.append(item)

    count = _as_int(section.get("count"))
    return {"count": count if count is not None else len(items), "items": items}


def map_attributes(attributes: Any) -> Dict[str, Any]:
    """Map response attributes onto the ``data`` dict"""
    if not isinstance(attributes, dict):
        return {}

    data = dict(attributes)
    price = resolve_price(attributes)
    if price is not None:
        data["price"] = price
    if "price" in data or "currency" in attributes:
        data["currency"] = attributes.get("currency") or "USD"

    if "records" in attributes:
        data["records"] = flatten_records(attributes.get("records"))
    return data


def parse_response(xml: str) -> OpenSRSResult:
    """Parse a raw response document into an ``OpenSRSResult``"""
    try:
        block = decode_document(xml)
    except (ET.ParseError, ValueError) as e:
        logger.error("Failed to parse OpenSRS response: %s", e)
        return OpenSRSResult.failure(f"Failed to parse OpenSRS response: {e}", PARSE_ERROR)

    response_code = block.get("response_code")
    response_code = str(response_code) if response_code not in (None, "") else None
    is_success = _as_int(block.get("is_success"))
    if is_success is not None:
        success = is_success == 1
    else:
        success = response_code in SUCCESS_CODES

    attributes = block.get("attributes")
    result = OpenSRSResult(
        success=success,
        response_code=response_code,
        response_text=block.get("response_text") or None,
        is_success=is_success,
        request_id=block.get("request_id") or None,
        data=map_attributes(attributes),
    )
    if not success:
        result.error = result.response_text or "OpenSRS request failed"

    if isinstance(attributes, dict):
        for section, field in SERVICE_SECTIONS.items():
            if section in attributes:
                setattr(result, field, parse_service_section(attributes[section]))
        if "is_search_completed" in attributes:
            result.is_search_completed = _truthy(attributes["is_search_completed"])
        if "request_response_time" in attributes:
            result.response_time = attributes["request_response_time"]

    return result


def lookup_availability(result: OpenSRSResult) -> Tuple[bool, str]:
    """Interpret a LOOKUP result as ``(available, message)``.

    Code 210 means available and 211 taken. Otherwise the ``status``
    attribute decides, then a plain 200, then the response text.
    """
    if result.response_code == "211":
        return False, "Domain is taken"
    if not result.success:
        return False, result.response_text or "Domain lookup failed"
    if result.response_code == "210":
        return True, "Domain is available"

    status = str(result.data.get("status") or "").lower()
    if status in ("available", "taken"):
        available = status == "available"
        return available, "Domain is available" if available else "Domain is taken"
    if result.response_code == "200":
        return True, "Domain is available"

    text = (result.response_text or "").lower()
    if "not available" in text or "taken" in text:
        return False, "Domain is taken"
    if "available" in text:
        return True, "Domain is available"
    return False, "Unknown status"


def records_of(result: OpenSRSResult) -> List[Dict[str, Any]]:
    records = result.data.get("records")
    return list(records) if isinstance(records, list) else []
