"""DNS schemas"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

RECORD_TYPE_PATTERN = "^(A|AAAA|CNAME|MX|TXT|SRV|NS|PTR)$"


def _upper(value):
    return value.strip().upper() if isinstance(value, str) else value


class DNSRecord(BaseModel):
    """Schema for a DNS record sent to OpenSRS"""
    type: str = Field(..., pattern=RECORD_TYPE_PATTERN)
    subdomain: str = Field(default="", max_length=255)
    address: str = Field(..., min_length=1)
    ttl: Optional[int] = Field(None, ge=1)
    priority: Optional[int] = Field(None, ge=0, le=65535)
    weight: Optional[int] = Field(None, ge=0, le=65535)
    port: Optional[int] = Field(None, ge=1, le=65535)

    normalize_type = field_validator("type", mode="before")(_upper)

    @model_validator(mode="after")
    def check_type_fields(self):
        if self.type in ("MX", "SRV") and self.priority is None:
            raise ValueError(f"{self.type} records require priority")
        if self.type == "SRV" and (self.weight is None or self.port is None):
            raise ValueError("SRV records require weight and port")
        return self

    def as_record(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class DNSRecordMatch(BaseModel):
    """Identifies an existing record by type and subdomain, optionally address"""
    type: str = Field(..., pattern=RECORD_TYPE_PATTERN)
    subdomain: str = Field(default="", max_length=255)
    address: Optional[str] = None

    normalize_type = field_validator("type", mode="before")(_upper)

    def as_criteria(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ZoneRequest(BaseModel):
    """Schema for replacing a whole zone"""
    domain: str = Field(..., min_length=1)
    records: List[DNSRecord]


class CreateZoneRequest(BaseModel):
    """Schema for creating a zone"""
    domain: str = Field(..., min_length=1)
    records: List[DNSRecord] = Field(default_factory=list)
    dns_template: Optional[str] = None


class AddRecordRequest(BaseModel):
    """Schema for adding one record"""
    domain: str = Field(..., min_length=1)
    record: DNSRecord
    confirm: bool = False


class UpdateRecordRequest(BaseModel):
    """Schema for replacing one record"""
    domain: str = Field(..., min_length=1)
    old_record: DNSRecordMatch = Field(..., alias="oldRecord")
    new_record: DNSRecord = Field(..., alias="newRecord")
    confirm: bool = False

    class Config:
        populate_by_name = True


class DeleteRecordRequest(BaseModel):
    """Schema for deleting one record"""
    domain: str = Field(..., min_length=1)
    record: DNSRecordMatch
    confirm: bool = False


class ManageRecordRequest(BaseModel):
    """Schema for the step-by-step record workflow"""
    domain: str = Field(..., min_length=1)
    action: Literal["add", "update", "delete"]
    record: Dict[str, Any]
    old_record: Optional[DNSRecordMatch] = Field(None, alias="oldRecord")
    confirm: bool = True

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def check_old_record(self):
        if self.action == "update" and self.old_record is None:
            raise ValueError("oldRecord is required for update action")
        return self


class StoredDNSRecord(BaseModel):
    """DNS record kept on the local domain mirror"""
    type: str = Field(..., pattern=RECORD_TYPE_PATTERN)
    subdomain: str = Field(default="", max_length=255)
    address: str = Field(..., min_length=1)
    ttl: int = Field(default=3600, ge=300, le=86400)
    priority: Optional[int] = Field(None, ge=0, le=65535)
    weight: Optional[int] = Field(None, ge=0, le=65535)
    port: Optional[int] = Field(None, ge=1, le=65535)
    last_modified: Optional[datetime] = None

    normalize_type = field_validator("type", mode="before")(_upper)

    @model_validator(mode="after")
    def check_type_fields(self):
        if self.type in ("MX", "SRV") and self.priority is None:
            raise ValueError(f"{self.type} records require priority")
        if self.type == "SRV" and (self.weight is None or self.port is None):
            raise ValueError("SRV records require weight and port")
        return self


class StoredDNSRecords(BaseModel):
    """Schema for replacing the records of a local domain"""
    records: List[StoredDNSRecord]
