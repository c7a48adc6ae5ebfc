# schemas/dashboard.py
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Headline counters; serialized in camelCase for the dashboard UI
class DashboardStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_products: int
    total_customers: int
    total_orders: int
    total_revenue: float
    pending_orders: int
    low_stock_products: int


# One calendar month of revenue, month formatted as YYYY-MM
class RevenueData(BaseModel):
    month: str
    revenue: float


class CategoryData(BaseModel):
    category: Optional[str] = None
    products: int
    revenue: float
