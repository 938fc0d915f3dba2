# app/api/v1/analytics.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional, List
from datetime import date

from app.api.v1.deps import get_current_user
from app.db import models
from app.db.session import get_db
from app.schemas.analytics import BudgetSummary, CategorySpend, DailySpend
from app.services.budget import budget_summary, spend_by_category, spend_by_date

router = APIRouter(tags=["analytics"])

def _check_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

@router.get("/by_category", response_model=List[CategorySpend])
def expenses_by_category(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _check_range(start_date, end_date)
    return spend_by_category(db, current_user, start_date, end_date)

@router.get("/summary", response_model=BudgetSummary)
def summary(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _check_range(start_date, end_date)
    return budget_summary(db, current_user, start_date, end_date)

@router.get("/by_date", response_model=List[DailySpend])
def expenses_by_date(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _check_range(start_date, end_date)
    return spend_by_date(db, current_user, start_date, end_date)
