# backend/services/orders.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.customer import Customer
from models.order import Order, OrderItem, OrderStatus
from models.product import Product
from schemas.order import OrderCreate, OrderDetail, OrderItemOut, OrderListItem
from utils.errors import NotFound, ReferencedEntityMissing

logger = logging.getLogger(__name__)


def _header(order: Order, customer_name: Optional[str], customer_email: Optional[str]) -> dict:
    return {
        "id": order.id,
        "customer_id": order.customer_id,
        "total_amount": order.total_amount,
        "status": order.status,
        "notes": order.notes,
        "user_id": order.user_id,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "customer_name": customer_name,
        "customer_email": customer_email,
    }


def _price_lines(db: Session, user_id: str, payload: OrderCreate) -> Tuple[List[dict], float]:
    """Resolve current prices for every requested product and compute line totals.

    Runs entirely before anything is written, so a missing product aborts the
    order without touching the orders or order_items tables.
    """
    lines: List[dict] = []
    total_amount = 0.0
    for item in payload.items:
        unit_price = (
            db.query(Product.price)
            .filter(Product.id == item.product_id, Product.user_id == user_id)
            .scalar()
        )
        if unit_price is None:
            raise ReferencedEntityMissing(f"Product {item.product_id} not found")

        total_price = unit_price * item.quantity
        total_amount += total_price
        lines.append({
            "product_id": item.product_id,
            "quantity": item.quantity,
            "unit_price": unit_price,
            "total_price": total_price,
        })
    return lines, total_amount


def create_order(db: Session, user_id: str, payload: OrderCreate) -> Order:
    customer_owned = (
        db.query(Customer.id)
        .filter(Customer.id == payload.customer_id, Customer.user_id == user_id)
        .first()
    )
    if not customer_owned:
        raise ReferencedEntityMissing(f"Customer {payload.customer_id} not found")

    lines, total_amount = _price_lines(db, user_id, payload)

    # Header and items go out in a single transaction
    order = Order(
        customer_id=payload.customer_id,
        user_id=user_id,
        status=OrderStatus.PENDING,
        total_amount=total_amount,
        notes=payload.notes,
    )
    try:
        db.add(order)
        db.flush()
        db.add_all([OrderItem(order_id=order.id, **line) for line in lines])
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Order creation rolled back for customer %s", payload.customer_id)
        raise

    db.refresh(order)
    return order


def list_orders(db: Session, user_id: str, status: Optional[OrderStatus] = None) -> List[OrderListItem]:
    q = (
        db.query(Order, Customer.name, Customer.email)
        .outerjoin(Customer, Order.customer_id == Customer.id)
        .filter(Order.user_id == user_id)
    )
    if status is not None:
        q = q.filter(Order.status == status)

    rows = q.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return [OrderListItem(**_header(o, name, email)) for o, name, email in rows]


def get_order_detail(db: Session, user_id: str, order_id: int) -> OrderDetail:
    row = (
        db.query(Order, Customer.name, Customer.email)
        .outerjoin(Customer, Order.customer_id == Customer.id)
        .filter(Order.id == order_id, Order.user_id == user_id)
        .first()
    )
    if not row:
        raise NotFound("Order not found")
    order, customer_name, customer_email = row

    item_rows = (
        db.query(OrderItem, Product.name, Product.sku)
        .outerjoin(Product, OrderItem.product_id == Product.id)
        .filter(OrderItem.order_id == order.id)
        .order_by(OrderItem.id.asc())
        .all()
    )
    items: List[OrderItemOut] = []
    for it, product_name, product_sku in item_rows:
        items.append(OrderItemOut(
            id=it.id,
            order_id=it.order_id,
            product_id=it.product_id,
            quantity=it.quantity,
            unit_price=it.unit_price,
            total_price=it.total_price,
            created_at=it.created_at,
            updated_at=it.updated_at,
            product_name=product_name,
            product_sku=product_sku,
        ))

    return OrderDetail(**_header(order, customer_name, customer_email), items=items)


def update_order_status(db: Session, user_id: str, order_id: int, new_status: OrderStatus) -> Tuple[Order, OrderStatus]:
    order = db.query(Order).filter(Order.id == order_id, Order.user_id == user_id).first()
    if not order:
        raise NotFound("Order not found")

    old_status = order.status
    order.status = new_status
    db.commit()
    db.refresh(order)
    return order, old_status
