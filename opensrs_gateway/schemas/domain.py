"""Domain schemas"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from opensrs_gateway.models.domain import DomainStatus, DNSZoneStatus
from opensrs_gateway.schemas.contact import ContactSet

DOMAIN_PATTERN = r"^[a-z0-9]([a-z0-9\-]{0,61}[a-z0-9])?(\.[a-z0-9]([a-z0-9\-]{0,61}[a-z0-9])?)+$"


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


class DomainLookupRequest(BaseModel):
    """Schema for a single availability lookup"""
    domain: str = Field(..., pattern=DOMAIN_PATTERN)

    normalize_domain = field_validator("domain", mode="before")(_lower)


class BulkDomainsRequest(BaseModel):
    """Schema for bulk lookup and bulk price"""
    domains: List[str] = Field(..., min_length=1)

    @field_validator("domains", mode="before")
    @classmethod
    def normalize_domains(cls, v):
        if isinstance(v, list):
            return [_lower(domain) for domain in v if isinstance(domain, str) and domain.strip()]
        return v


class DomainRegisterRequest(ContactSet):
    """Schema for registering a domain"""
    domain: str = Field(..., pattern=DOMAIN_PATTERN)
    period: int = Field(default=1, ge=1, le=10)
    auto_renew: bool = False
    whois_privacy: bool = False
    nameservers: List[str] = Field(default_factory=list, max_length=13)
    reg_username: Optional[str] = None
    reg_password: Optional[str] = None
    # Owner of the local mirror; no mirror is written when omitted
    user_id: Optional[int] = None
    price: Optional[float] = Field(None, ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)

    normalize_domain = field_validator("domain", mode="before")(_lower)

    @model_validator(mode="after")
    def require_registrant(self):
        if self.registrant_contact is None:
            raise ValueError("registrant_contact is required")
        return self


class DomainRenewRequest(BaseModel):
    """Schema for renewing a domain"""
    period: int = Field(default=1, ge=1, le=10)
    current_expiration_year: Optional[int] = Field(None, ge=2000, le=2200)
    auto_renew: Optional[bool] = None


class DomainModifyRequest(BaseModel):
    """Schema for common domain settings changes"""
    nameservers: Optional[List[str]] = Field(None, min_length=1, max_length=13)
    auto_renew: Optional[bool] = None
    whois_privacy: Optional[bool] = None
    lock_state: Optional[bool] = None

    @model_validator(mode="after")
    def require_change(self):
        if all(value is None for value in self.model_dump().values()):
            raise ValueError("At least one of nameservers, auto_renew, whois_privacy, lock_state is required")
        return self


class DomainModificationRequest(BaseModel):
    """Schema for a typed modification, e.g. ``auto_renew`` or ``locking``"""
    domain: str = Field(..., pattern=DOMAIN_PATTERN)
    modification_type: str = Field(..., min_length=1, alias="modificationType")
    nameservers: Optional[List[str]] = None
    contacts: Optional[ContactSet] = None
    auto_renew: Optional[bool] = Field(None, alias="autoRenew")
    let_expire: Optional[bool] = Field(None, alias="letExpire")
    state: Optional[Any] = None
    lock_state: Optional[bool] = Field(None, alias="lockState")
    forwarding_email: Optional[str] = Field(None, alias="forwardingEmail")
    attributes: Dict[str, Any] = Field(default_factory=dict)

    normalize_domain = field_validator("domain", mode="before")(_lower)

    class Config:
        populate_by_name = True

    def modification_attributes(self) -> Dict[str, Any]:
        attributes = dict(self.attributes)
        for key in ("nameservers", "auto_renew", "let_expire", "state", "lock_state", "forwarding_email"):
            value = getattr(self, key)
            if value is not None:
                attributes[key] = value
        if self.contacts is not None:
            attributes["contacts"] = self.contacts.as_contacts()
        return attributes


class NameserverEntry(BaseModel):
    """Nameserver on the local mirror"""
    name: str = Field(..., min_length=1)
    ip: Optional[str] = Field(None, pattern=r"^(?:[0-9]{1,3}\.){3}[0-9]{1,3}$")


class DomainUpdate(BaseModel):
    """Schema for updating the local mirror"""
    status: Optional[DomainStatus] = None
    expiration_date: Optional[datetime] = None
    auto_renew: Optional[bool] = None
    nameservers: Optional[List[NameserverEntry]] = None
    dns_zone_status: Optional[DNSZoneStatus] = None
    privacy_enabled: Optional[bool] = None
    transfer_lock: Optional[bool] = None
    delete_lock: Optional[bool] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = Field(None, max_length=1000)


class DomainResponse(BaseModel):
    """Schema for a local domain mirror"""
    id: int
    domain_name: str
    owner_id: int
    status: DomainStatus
    registration_date: datetime
    expiration_date: datetime
    auto_renew: bool
    registration_period: int
    price_amount: Optional[float] = None
    price_currency: str
    opensrs_data: Optional[Dict[str, Any]] = None
    contacts: Optional[Dict[str, Any]] = None
    nameservers: Optional[List[Dict[str, Any]]] = None
    dns_records: Optional[List[Dict[str, Any]]] = None
    dns_zone_status: DNSZoneStatus
    privacy_enabled: bool
    transfer_lock: bool
    delete_lock: bool
    tags: Optional[List[str]] = None
    notes: Optional[str] = None
    days_until_expiration: Optional[int] = None
    removed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
