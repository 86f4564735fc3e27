"""User model"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum

from opensrs_gateway.core.database import Base


class UserRole(str, enum.Enum):
    """User role"""
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """Account owning registered domains"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    phone = Column(String(50), nullable=True)

    # {street, city, state, postal_code, country}
    address = Column(JSON, nullable=True)

    # Optional OpenSRS sub-account
    opensrs_username = Column(String(255), nullable=True, index=True)
    opensrs_api_key = Column(String(255), nullable=True)
    opensrs_test_mode = Column(Boolean, default=True, nullable=False)

    role = Column(SQLEnum(UserRole), default=UserRole.USER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)
    registration_date = Column(DateTime, default=datetime.utcnow, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    domains = relationship("Domain", back_populates="owner")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def opensrs_credentials(self) -> dict:
        return {"username": self.opensrs_username, "test_mode": self.opensrs_test_mode}
