# backend/routes/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from utils.session import get_current_user
from schemas.user import CurrentUser
from schemas.dashboard import DashboardStats, RevenueData, CategoryData
from services import dashboard as dashboard_service

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"]
)


# === Endpoint 1: Dashboard Summary ===

@router.get("/stats", response_model=DashboardStats)
def get_stats(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return dashboard_service.get_stats(db, current_user.id)


# === Endpoint 2: Monthly revenue chart ===

@router.get("/revenue", response_model=List[RevenueData])
def get_revenue(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return dashboard_service.get_revenue_by_month(db, current_user.id)


# === Endpoint 3: Top categories ===

@router.get("/categories", response_model=List[CategoryData])
def get_categories(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return dashboard_service.get_category_rollup(db, current_user.id)
