from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime

from models.order import OrderStatus


# Input schema for a single order line
class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)


# Input schema for creating a new order; status and totals are never taken from the client
class OrderCreate(BaseModel):
    customer_id: int
    items: List[OrderItemCreate] = Field(..., min_length=1, description="Co najmniej jedna pozycja zamówienia")
    notes: Optional[str] = None


# Schema for updating order status
class OrderStatusUpdate(BaseModel):
    status: OrderStatus


# Output schema for the order header
class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: int
    customer_id: int
    total_amount: float = Field(..., ge=0)
    status: OrderStatus
    notes: Optional[str] = None
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Order header as shown in listings
class OrderListItem(OrderResponse):
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    product_id: int
    quantity: int
    unit_price: float
    total_price: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # None when the product has been deleted since the order was placed
    product_name: Optional[str] = None
    product_sku: Optional[str] = None


# Output schema representing the full order details
class OrderDetail(OrderListItem):
    items: List[OrderItemOut]
