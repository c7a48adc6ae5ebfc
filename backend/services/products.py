# backend/services/products.py
from typing import List

from sqlalchemy.orm import Session

from models.product import Product
from schemas.product import ProductCreate, ProductUpdate
from utils.errors import NotFound


def _owned(db: Session, user_id: str):
    return db.query(Product).filter(Product.user_id == user_id)


def list_products(db: Session, user_id: str) -> List[Product]:
    return _owned(db, user_id).order_by(Product.created_at.desc(), Product.id.desc()).all()


def get_product(db: Session, user_id: str, product_id: int) -> Product:
    product = _owned(db, user_id).filter(Product.id == product_id).first()
    if not product:
        raise NotFound("Product not found")
    return product


def create_product(db: Session, user_id: str, payload: ProductCreate) -> Product:
    product = Product(**payload.model_dump(), user_id=user_id)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def update_product(db: Session, user_id: str, product_id: int, payload: ProductUpdate) -> Product:
    product = get_product(db, user_id, product_id)

    # Only fields present in the request body are touched
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(product, key, value)

    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, user_id: str, product_id: int) -> None:
    deleted = _owned(db, user_id).filter(Product.id == product_id).delete(synchronize_session=False)
    if not deleted:
        db.rollback()
        raise NotFound("Product not found")
    db.commit()
