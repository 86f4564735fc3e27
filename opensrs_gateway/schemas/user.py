"""User schemas"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from opensrs_gateway.models.user import UserRole

PHONE_PATTERN = r"^\+?[\d\s\-\(\)\.]+$"


class Address(BaseModel):
    """Postal address"""
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = "US"


class OpenSRSCredentials(BaseModel):
    """OpenSRS sub-account credentials"""
    username: Optional[str] = None
    api_key: Optional[str] = None
    test_mode: bool = True


class OpenSRSAccount(BaseModel):
    """Public view of the sub-account, without the API key"""
    username: Optional[str] = None
    test_mode: bool = True


class UserBase(BaseModel):
    """Base user schema"""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[Address] = None


class UserCreate(UserBase):
    """Schema for user creation"""
    password: str = Field(..., min_length=6)
    opensrs_credentials: Optional[OpenSRSCredentials] = None


class UserLogin(BaseModel):
    """Schema for user login, by email or username"""
    login: str = Field(..., min_length=1, alias="emailOrUsername")
    password: str

    class Config:
        populate_by_name = True


class UserUpdate(BaseModel):
    """Schema for user update"""
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[Address] = None
    opensrs_credentials: Optional[OpenSRSCredentials] = None


class PasswordChange(BaseModel):
    """Schema for a password change"""
    current_password: str
    new_password: str = Field(..., min_length=6)


class UserResponse(BaseModel):
    """Schema for user response; never carries secrets"""
    id: int
    username: str
    email: EmailStr
    first_name: str
    last_name: str
    full_name: str
    phone: Optional[str] = None
    address: Optional[Address] = None
    opensrs_credentials: Optional[OpenSRSAccount] = None
    role: UserRole
    is_active: bool
    last_login: Optional[datetime] = None
    registration_date: datetime
    created_at: datetime

    class Config:
        from_attributes = True


class UserProfile(UserResponse):
    """User with a count of owned domains"""
    domain_count: int = 0


class TokenResponse(BaseModel):
    """Schema for token response"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
