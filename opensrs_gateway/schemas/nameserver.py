"""Nameserver schemas"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

IPV4_PATTERN = r"^(?:[0-9]{1,3}\.){3}[0-9]{1,3}$"


class NameserverUpdateRequest(BaseModel):
    """Schema for assigning nameservers to a domain"""
    domain: str = Field(..., min_length=1)
    nameservers: List[str] = Field(..., min_length=1, max_length=13)
    op_type: Literal["assign", "add", "remove"] = "assign"


class NameserverCreateRequest(BaseModel):
    """Schema for creating a host object"""
    name: str = Field(..., min_length=1)
    ip_address: str = Field(..., pattern=IPV4_PATTERN)
    domain: Optional[str] = None


class NameserverModifyRequest(BaseModel):
    """Schema for changing host addresses"""
    ip_addresses: List[str] = Field(..., min_length=1)
    new_name: Optional[str] = None


class NameserverCheckRequest(BaseModel):
    """Schema for a registry nameserver check"""
    nameserver: str = Field(..., min_length=1)
    tld: Optional[str] = None
