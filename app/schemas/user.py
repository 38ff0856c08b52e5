"""
User and billing schemas.
"""
from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field
from app.schemas.base import BaseSchema, TimestampSchema, IDSchema


class UserBase(BaseSchema):
    """Base user schema."""

    email: EmailStr
    full_name: Optional[str] = None


class UserUpdate(BaseSchema):
    """User update schema."""

    full_name: Optional[str] = Field(None, max_length=100)


class UserResponse(UserBase, IDSchema, TimestampSchema):
    """User response schema."""

    email_verified: bool
    is_active: bool
    is_admin: bool = False
    last_seen_at: Optional[datetime] = None


class UserProfileResponse(UserResponse):
    """Full user profile response."""

    resumes_count: int = 0
    cover_letters_count: int = 0
    job_applications_count: int = 0
    subscription_status: Optional[str] = None


class BillingDetailsUpdate(BaseSchema):
    """Billing details request body; `country` is ISO-3166 alpha-2."""

    full_name: str = Field(..., min_length=1, max_length=100)
    address_line1: str = Field(..., min_length=1, max_length=200)
    address_line2: Optional[str] = Field(None, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: str = Field(..., min_length=2, max_length=2)
    postal_code: str = Field(..., min_length=1, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)
    tax_id: Optional[str] = Field(None, max_length=50)


class BillingDetailsResponse(BillingDetailsUpdate, IDSchema, TimestampSchema):
    """Stored billing details plus the gateway they route to."""

    gateway: Optional[str] = None
    currency: Optional[str] = None
