# backend/services/customers.py
from typing import List

from sqlalchemy.orm import Session

from models.customer import Customer
from schemas.customer import CustomerCreate, CustomerUpdate
from utils.errors import NotFound


def _owned(db: Session, user_id: str):
    return db.query(Customer).filter(Customer.user_id == user_id)


def list_customers(db: Session, user_id: str) -> List[Customer]:
    return _owned(db, user_id).order_by(Customer.created_at.desc(), Customer.id.desc()).all()


def get_customer(db: Session, user_id: str, customer_id: int) -> Customer:
    customer = _owned(db, user_id).filter(Customer.id == customer_id).first()
    if not customer:
        raise NotFound("Customer not found")
    return customer


def create_customer(db: Session, user_id: str, payload: CustomerCreate) -> Customer:
    data = payload.model_dump()
    data["country"] = data.get("country") or "Brazil"
    customer = Customer(**data, user_id=user_id)
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


def update_customer(db: Session, user_id: str, customer_id: int, payload: CustomerUpdate) -> Customer:
    customer = get_customer(db, user_id, customer_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(customer, key, value)
    db.commit()
    db.refresh(customer)
    return customer


def delete_customer(db: Session, user_id: str, customer_id: int) -> None:
    deleted = _owned(db, user_id).filter(Customer.id == customer_id).delete(synchronize_session=False)
    if not deleted:
        db.rollback()
        raise NotFound("Customer not found")
    db.commit()
