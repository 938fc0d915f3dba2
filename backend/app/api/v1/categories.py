# app/api/v1/categories.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List
from app.schemas.category import SpendingCategoryCreate, SpendingCategoryOut, SpendingCategoryUpdate
from app.api.v1.deps import get_current_user, get_owned_category
from app.db.session import get_db
from app.db import models

router = APIRouter(tags=["spending-categories"])

def _name_taken(db: Session, user_id: int, name: str, exclude_id: int = None) -> bool:
    q = db.query(models.SpendingCategory).filter(models.SpendingCategory.user_id == user_id, func.lower(models.SpendingCategory.name) == name.strip().lower())
    if exclude_id is not None:
        q = q.filter(models.SpendingCategory.id != exclude_id)
    return q.first() is not None

@router.post("", response_model=SpendingCategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(payload: SpendingCategoryCreate, db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    # names are unique per user
    if _name_taken(db, current_user.id, payload.name):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category with this name already exists")
    new = models.SpendingCategory(
        user_id=current_user.id,
        name=payload.name,
        total_budget_percent=payload.total_budget_percent,
        total_budget_number=payload.total_budget_number,
    )
    db.add(new)
    db.commit()
    db.refresh(new)
    return new

@router.get("", response_model=List[SpendingCategoryOut])
def list_categories(skip: int = 0, limit: int = 100, db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    return (
        db.query(models.SpendingCategory)
        .filter(models.SpendingCategory.user_id == current_user.id)
        .order_by(models.SpendingCategory.id)
        .offset(skip)
        .limit(limit)
        .all()
    )

@router.get("/{category_id}", response_model=SpendingCategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    return get_owned_category(db, current_user, category_id)

@router.patch("/{category_id}", response_model=SpendingCategoryOut)
def update_category(category_id: int, payload: SpendingCategoryUpdate, db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    cat = get_owned_category(db, current_user, category_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("name") is not None:
        if _name_taken(db, current_user.id, data["name"], exclude_id=cat.id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category with this name already exists")
        cat.name = data["name"]
    # explicit nulls clear a budget
    if "total_budget_percent" in data:
        cat.total_budget_percent = data["total_budget_percent"]
    if "total_budget_number" in data:
        cat.total_budget_number = data["total_budget_number"]
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat

@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int, db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    cat = get_owned_category(db, current_user, category_id)
    # transactions keep existing, just lose their category
    for txn in cat.transactions:
        txn.category_id = None
    db.delete(cat)
    db.commit()
    return None
