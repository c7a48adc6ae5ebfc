# backend/routes/products.py
from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from utils.session import get_current_user
from utils.audit import write_log, client_ip
from schemas.user import CurrentUser, SuccessResponse
import schemas.product as product_schemas
from services import products as product_service

router = APIRouter(prefix="/products", tags=["Products"])


# =========================
# LISTA PRODUKTÓW
# =========================
@router.get("", response_model=List[product_schemas.ProductResponse])
def list_products(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return product_service.list_products(db, current_user.id)


# =========================
# POJEDYNCZY PRODUKT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductResponse)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return product_service.get_product(db, current_user.id, product_id)


# =========================
# DODAWANIE PRODUKTU
# =========================
@router.post("", response_model=product_schemas.ProductResponse, status_code=status.HTTP_201_CREATED)
def add_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    product = product_service.create_product(db, current_user.id, payload)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"id": product.id, "name": product.name},
    )
    return product


# =========================
# AKTUALIZACJA PRODUKTU (częściowa)
# =========================
@router.put("/{product_id}", response_model=product_schemas.ProductResponse)
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    product = product_service.update_product(db, current_user.id, product_id, payload)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
        status="SUCCESS", ip=client_ip(request),
        meta={"id": product.id, "fields": sorted(payload.model_dump(exclude_unset=True))},
    )
    return product


# =========================
# USUWANIE
# =========================
@router.delete("/{product_id}", response_model=SuccessResponse)
def delete_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    product_service.delete_product(db, current_user.id, product_id)
    write_log(db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products",
              status="SUCCESS", ip=client_ip(request), meta={"id": product_id})
    return {"success": True}
