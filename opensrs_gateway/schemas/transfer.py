"""Transfer schemas"""
from typing import List, Optional
from pydantic import BaseModel, Field

from opensrs_gateway.schemas.contact import ContactSet


class TransferCheckRequest(BaseModel):
    """Schema for checking transferability"""
    domain: str = Field(..., min_length=1)
    auth_info: Optional[str] = None


class TransferProcessRequest(ContactSet):
    """Schema for starting a transfer in"""
    domain: str = Field(..., min_length=1)
    auth_info: str = Field(..., min_length=1)
    nameservers: List[str] = Field(default_factory=list, max_length=13)
