# backend/services/dashboard.py
import calendar
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.customer import Customer
from models.order import Order, OrderItem, OrderStatus
from models.product import Product
from schemas.dashboard import CategoryData, DashboardStats, RevenueData

# Threshold for low stock alert
LOW_STOCK_THRESHOLD = 10
REVENUE_MONTHS = 12
TOP_CATEGORIES = 10


def _month_bucket(db: Session, column):
    # YYYY-MM label for the row's calendar month, per SQL dialect
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        return func.strftime("%Y-%m", column)
    if dialect in ("mysql", "mariadb"):
        return func.date_format(column, "%Y-%m")
    return func.to_char(column, "YYYY-MM")


def months_ago(now: datetime, months: int) -> datetime:
    """Same day and time `months` calendar months back, clamped to the month's length."""
    index = now.year * 12 + (now.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def get_stats(db: Session, user_id: str) -> DashboardStats:
    total_products = db.query(Product).filter(
        Product.user_id == user_id, Product.is_active == True  # noqa: E712
    ).count()

    total_customers = db.query(Customer).filter(
        Customer.user_id == user_id, Customer.is_active == True  # noqa: E712
    ).count()

    total_orders = db.query(Order).filter(Order.user_id == user_id).count()

    pending_orders = db.query(Order).filter(
        Order.user_id == user_id, Order.status == OrderStatus.PENDING
    ).count()

    # Count products below stock threshold
    low_stock_products = db.query(Product).filter(
        Product.user_id == user_id,
        Product.is_active == True,  # noqa: E712
        Product.stock_quantity < LOW_STOCK_THRESHOLD,
    ).count()

    total_revenue = db.query(
        func.coalesce(func.sum(Order.total_amount), 0)
    ).filter(Order.user_id == user_id).scalar()

    return DashboardStats(
        total_products=total_products,
        total_customers=total_customers,
        total_orders=total_orders,
        total_revenue=float(total_revenue or 0),
        pending_orders=pending_orders,
        low_stock_products=low_stock_products,
    )


def get_revenue_by_month(db: Session, user_id: str, now: Optional[datetime] = None) -> List[RevenueData]:
    now = now or datetime.now(timezone.utc)
    since = months_ago(now, REVENUE_MONTHS)
    month = _month_bucket(db, Order.created_at).label("month")

    # Aggregate revenue by calendar month for the trailing year
    rows = (
        db.query(month, func.sum(Order.total_amount).label("revenue"))
        .filter(Order.user_id == user_id, Order.created_at >= since)
        .group_by(month)
        .order_by(month.desc())
        .limit(REVENUE_MONTHS)
        .all()
    )
    return [RevenueData(month=row.month, revenue=float(row.revenue or 0)) for row in rows]


def get_category_rollup(db: Session, user_id: str) -> List[CategoryData]:
    # Revenue per product from the caller's own orders, one row per product
    product_revenue = (
        db.query(
            OrderItem.product_id.label("product_id"),
            func.sum(OrderItem.total_price).label("revenue"),
        )
        .join(Order, OrderItem.order_id == Order.id)
        .filter(Order.user_id == user_id)
        .group_by(OrderItem.product_id)
        .subquery()
    )
    revenue = func.coalesce(func.sum(product_revenue.c.revenue), 0)

    rows = (
        db.query(
            Product.category.label("category"),
            func.count(Product.id).label("products"),
            revenue.label("revenue"),
        )
        .outerjoin(product_revenue, product_revenue.c.product_id == Product.id)
        .filter(Product.user_id == user_id, Product.is_active == True)  # noqa: E712
        .group_by(Product.category)
        .order_by(revenue.desc(), Product.category.asc())
        .limit(TOP_CATEGORIES)
        .all()
    )
    return [
        CategoryData(category=row.category, products=row.products, revenue=float(row.revenue or 0))
        for row in rows
    ]
