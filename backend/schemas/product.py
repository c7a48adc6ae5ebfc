# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Shared base attributes for product entities
class ProductBase(ORMBase):
    name: str = Field(..., min_length=1, description="Nazwa produktu")
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    stock_quantity: int = Field(..., ge=0)
    sku: Optional[str] = None


# Schema for creating a new product
class ProductCreate(ProductBase):
    pass


# Schema for partial product updates
class ProductUpdate(ORMBase):
    """Schema for PUT requests - every field optional, constraints still apply."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1)
    stock_quantity: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = None
    is_active: Optional[bool] = None

    # Columns that are NOT NULL may be omitted but not cleared
    @field_validator("name", "price", "category", "stock_quantity", "is_active", mode="before")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v


# Full product representation
class ProductResponse(ProductBase):
    id: int
    is_active: bool
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
