"""Registered domain mirror"""
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, Text, Float, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum

from opensrs_gateway.core.database import Base


class DomainStatus(str, enum.Enum):
    """Registration status"""
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"
    SUSPENDED = "suspended"
    DELETED = "deleted"
    TRANSFERRED = "transferred"


class DNSZoneStatus(str, enum.Enum):
    """DNS zone status"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class Domain(Base):
    """Local record of a domain registered through OpenSRS"""
    __tablename__ = "domains"

    id = Column(Integer, primary_key=True, index=True)
    domain_name = Column(String(255), unique=True, nullable=False, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(SQLEnum(DomainStatus), default=DomainStatus.PENDING, nullable=False, index=True)

    registration_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    expiration_date = Column(DateTime, nullable=False, index=True)
    auto_renew = Column(Boolean, default=True, nullable=False)
    registration_period = Column(Integer, default=1, nullable=False)  # years, 1-10

    price_amount = Column(Float, nullable=True)
    price_currency = Column(String(3), default="USD", nullable=False)

    # {order_id, transfer_id, registration_id, response_code, response_text}
    opensrs_data = Column(JSON, nullable=True)
    order_id = Column(String(64), nullable=True, index=True)

    # {owner, admin, tech, billing}
    contacts = Column(JSON, nullable=True)
    # [{name, ip}]
    nameservers = Column(JSON, nullable=True)
    # [{type, subdomain, address, ttl, priority, weight, port, last_modified}]
    dns_records = Column(JSON, nullable=True)
    dns_zone_status = Column(SQLEnum(DNSZoneStatus), default=DNSZoneStatus.INACTIVE, nullable=False)

    privacy_enabled = Column(Boolean, default=False, nullable=False)
    privacy_expiration_date = Column(DateTime, nullable=True)
    transfer_lock = Column(Boolean, default=True, nullable=False)
    delete_lock = Column(Boolean, default=True, nullable=False)

    tags = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)

    removed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="domains")

    @property
    def days_until_expiration(self) -> Optional[int]:
        if not self.expiration_date:
            return None
        delta = self.expiration_date - datetime.utcnow()
        # round up partial days
        return delta.days + (1 if delta.seconds or delta.microseconds else 0)

    def is_expired(self) -> bool:
        return self.expiration_date < datetime.utcnow()

    def is_expiring_soon(self, days: int = 30) -> bool:
        return self.expiration_date <= datetime.utcnow() + timedelta(days=days)
