"""Contact normalization for registration, transfer and contact updates"""
import logging
import re
from typing import Any, Dict, Optional

from opensrs_gateway.opensrs.errors import ContactValidationError

logger = logging.getLogger(__name__)

REQUIRED_CONTACT_FIELDS = (
    "first_name",
    "last_name",
    "address1",
    "city",
    "state",
    "country",
    "postal_code",
    "phone",
    "email",
)

# Request roles mapped to OpenSRS contact_set keys
CONTACT_ROLES = {
    "registrant_contact": "owner",
    "admin_contact": "admin",
    "tech_contact": "tech",
    "billing_contact": "billing",
}

# camelCase aliases accepted from older clients
_ALIASES = {
    "firstName": "first_name",
    "lastName": "last_name",
    "orgName": "org_name",
    "organization": "org_name",
    "postalCode": "postal_code",
}


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """Format a phone number the way OpenSRS expects, e.g. ``+1.4165550123``"""
    if not phone:
        return phone
    digits = re.sub(r"[^\d+]", "", str(phone))
    # keep a single leading plus
    digits = "+" + digits.replace("+", "")
    if digits.startswith("+1") and len(digits) == 12:
        digits = f"{digits[:2]}.{digits[2:]}"
    return digits


def normalize_contact(contact: Dict[str, Any], strict: bool = False) -> Dict[str, Any]:
    """Return a normalized copy of a contact.

    Phone and fax are reformatted, country and state upper-cased. With
    ``strict`` a missing required field raises ContactValidationError,
    otherwise it is only logged.
    """
    normalized: Dict[str, Any] = {}
    for key, value in contact.items():
        if value is None:
            continue
        normalized[_ALIASES.get(key, key)] = value

    for field in ("phone", "fax"):
        if normalized.get(field):
            normalized[field] = normalize_phone(normalized[field])
    for field in ("country", "state"):
        if normalized.get(field):
            normalized[field] = str(normalized[field]).strip().upper()

    missing = [field for field in REQUIRED_CONTACT_FIELDS if not normalized.get(field)]
    if missing:
        if strict:
            raise ContactValidationError(
                f"Missing required contact fields: {', '.join(missing)}", missing=missing
            )
        logger.warning("Contact is missing required fields: %s", ", ".join(missing))

    return normalized


def build_contact_set(contacts: Dict[str, Any], fill_from_owner: bool = True) -> Dict[str, Dict[str, Any]]:
    """Build an OpenSRS ``contact_set`` from request contacts.

    Accepts either request role names (``registrant_contact``...) or
    OpenSRS role names (``owner``...). Admin and billing default to a
    copy of the owner contact.
    """
    contact_set: Dict[str, Dict[str, Any]] = {}
    for key, contact in contacts.items():
        if not contact:
            continue
        role = CONTACT_ROLES.get(key, key)
        if role not in CONTACT_ROLES.values():
            continue
        contact_set[role] = normalize_contact(contact, strict=(role == "owner"))

    owner = contact_set.get("owner")
    if fill_from_owner and owner:
        contact_set.setdefault("admin", dict(owner))
        contact_set.setdefault("billing", dict(owner))

    return contact_set
