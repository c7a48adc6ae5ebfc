# backend/routes/customers.py
from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from utils.session import get_current_user
from utils.audit import write_log, client_ip
from schemas.user import CurrentUser, SuccessResponse
from schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse
from services import customers as customer_service

router = APIRouter(prefix="/customers", tags=["Customers"])

# Customer address book, scoped to the authenticated user


@router.get("", response_model=List[CustomerResponse])
def list_customers(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return customer_service.list_customers(db, current_user.id)


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: int, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return customer_service.get_customer(db, current_user.id, customer_id)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    customer = customer_service.create_customer(db, current_user.id, payload)
    write_log(db, user_id=current_user.id, action="CUSTOMER_CREATE", resource="customers",
              status="SUCCESS", ip=client_ip(request), meta={"id": customer.id})
    return customer


# Update only the fields present in the payload
@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    customer = customer_service.update_customer(db, current_user.id, customer_id, payload)
    write_log(db, user_id=current_user.id, action="CUSTOMER_UPDATE", resource="customers",
              status="SUCCESS", ip=client_ip(request),
              meta={"id": customer.id, "fields": sorted(payload.model_dump(exclude_unset=True))})
    return customer


@router.delete("/{customer_id}", response_model=SuccessResponse)
def delete_customer(
    customer_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    customer_service.delete_customer(db, current_user.id, customer_id)
    write_log(db, user_id=current_user.id, action="CUSTOMER_DELETE", resource="customers",
              status="SUCCESS", ip=client_ip(request), meta={"id": customer_id})
    return {"success": True}
