# backend/routes/orders.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Request, Query, status
from sqlalchemy.orm import Session
import logging

from database import get_db
from utils.session import get_current_user
from utils.audit import write_log, client_ip
from models.order import OrderStatus
from schemas.user import CurrentUser
from schemas.order import (
    OrderCreate, OrderDetail, OrderListItem, OrderResponse, OrderStatusUpdate
)
from services import orders as order_service

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)


# List the caller's orders, newest first, with customer contact details
@router.get("", response_model=List[OrderListItem])
def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return order_service.list_orders(db, current_user.id, status_filter)


# Get details of a specific order
@router.get("/{order_id}", response_model=OrderDetail)
def get_order_detail(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return order_service.get_order_detail(db, current_user.id, order_id)


# Create an order priced from the current product catalogue
@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    order = order_service.create_order(db, current_user.id, payload)
    logger.info("Order %s created for user %s (total %.2f)", order.id, current_user.id, order.total_amount)

    write_log(
        db, user_id=current_user.id, action="ORDER_CREATE", resource="orders", status="SUCCESS",
        ip=client_ip(request),
        meta={"order_id": order.id, "items": len(payload.items), "total_amount": order.total_amount},
    )
    return order


# Set a new status; any status may follow any other
@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    order, old_status = order_service.update_order_status(db, current_user.id, order_id, payload.status)

    write_log(db, user_id=current_user.id, action="ORDER_STATUS_CHANGE", resource="orders", status="SUCCESS",
        ip=client_ip(request),
        meta={"order_id": order.id, "old": OrderStatus(old_status).value, "new": payload.status.value})
    return order
