"""Contact schemas"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class Contact(BaseModel):
    """Registrant, admin, tech or billing contact"""
    first_name: str = Field(..., min_length=1, max_length=64, alias="firstName")
    last_name: str = Field(..., min_length=1, max_length=64, alias="lastName")
    org_name: Optional[str] = Field(None, max_length=128, alias="orgName")
    address1: str = Field(..., min_length=1)
    address2: Optional[str] = None
    address3: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    country: str = Field(default="US", min_length=2, max_length=2)
    postal_code: str = Field(..., min_length=1, alias="postalCode")
    phone: str = Field(..., pattern=r"^\+?[\d\s\-\(\)\.]+$")
    fax: Optional[str] = Field(None, pattern=r"^\+?[\d\s\-\(\)\.]+$")
    email: EmailStr

    class Config:
        populate_by_name = True

    @field_validator("country", "state", mode="before")
    @classmethod
    def upper_codes(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class ContactSet(BaseModel):
    """Contacts by role; admin and billing default to the registrant"""
    registrant_contact: Optional[Contact] = None
    admin_contact: Optional[Contact] = None
    tech_contact: Optional[Contact] = None
    billing_contact: Optional[Contact] = None

    def as_contacts(self) -> Dict[str, Dict[str, Any]]:
        return {
            role: contact.model_dump(exclude_none=True)
            for role, contact in (
                ("registrant_contact", self.registrant_contact),
                ("admin_contact", self.admin_contact),
                ("tech_contact", self.tech_contact),
                ("billing_contact", self.billing_contact),
            )
            if contact is not None
        }
