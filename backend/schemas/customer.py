from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from schemas.product import ORMBase


# Shared properties for customer models
class CustomerBase(ORMBase):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = "Brazil"


# Schema for customer creation requests
class CustomerCreate(CustomerBase):
    pass


# Schema for partial customer updates
class CustomerUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name", "email", "country", "is_active", mode="before")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v


# Output schema for customer details
class CustomerResponse(CustomerBase):
    # Stored addresses are returned as-is, without re-validating the format
    email: str
    id: int
    is_active: bool
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
