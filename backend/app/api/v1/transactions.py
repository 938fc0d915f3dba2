# app/api/v1/transactions.py
from datetime import date, datetime, time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.api.v1.deps import get_current_user
from app.db import models
from app.db.session import get_db
from app.schemas.transaction import TransactionCreate, TransactionList, TransactionOut, TransactionUpdate

router = APIRouter(tags=["transactions"])


def _get_owned_transaction(db: Session, user: models.User, txn_id: int) -> models.Transaction:
    txn = db.query(models.Transaction).filter(models.Transaction.id == txn_id, models.Transaction.user_id == user.id).first()
    if not txn:
        raise HTTPException(status_code=404, detail=f"Transaction with id {txn_id} not found")
    return txn


def _check_category(db: Session, user: models.User, category_id: Optional[int]) -> None:
    if category_id is None:
        return
    exists = (
        db.query(models.SpendingCategory.id)
        .filter(models.SpendingCategory.id == category_id, models.SpendingCategory.user_id == user.id)
        .first()
    )
    if not exists:
        raise HTTPException(status_code=400, detail=f"Unknown category_id {category_id}")


@router.get("", response_model=TransactionList)
def list_transactions(
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    category_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(25, ge=1, le=200),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Paginated list of transactions for current user, newest first, with
    optional date range and category filter.
    """
    q = db.query(models.Transaction).filter(models.Transaction.user_id == current_user.id)

    if start_date:
        q = q.filter(models.Transaction.time >= datetime.combine(start_date, time.min))
    if end_date:
        q = q.filter(models.Transaction.time <= datetime.combine(end_date, time.max))
    if category_id is not None:
        q = q.filter(models.Transaction.category_id == category_id)

    total = q.count()
    items = (
        q.order_by(models.Transaction.time.desc(), models.Transaction.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return {"total": total, "page": page, "per_page": per_page, "items": items}


@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def create_transaction(payload: TransactionCreate, current_user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    _check_category(db, current_user, payload.category_id)
    t = models.Transaction(
        user_id=current_user.id,
        item_purchased=payload.item_purchased,
        cost=payload.cost,
        category_id=payload.category_id,
        plaid_category=payload.plaid_category,
    )
    if payload.time is not None:
        t.time = payload.time
    db.add(t)
    db.commit()
    db.refresh(t)
    return t


@router.get("/{txn_id}", response_model=TransactionOut)
def get_transaction(txn_id: int, current_user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _get_owned_transaction(db, current_user, txn_id)


@router.patch("/{txn_id}", response_model=TransactionOut)
def update_transaction(txn_id: int, payload: TransactionUpdate, current_user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    txn = _get_owned_transaction(db, current_user, txn_id)
    data = payload.model_dump(exclude_unset=True)
    if "category_id" in data:
        _check_category(db, current_user, data["category_id"])
        txn.category_id = data["category_id"]
    if data.get("item_purchased") is not None:
        txn.item_purchased = data["item_purchased"]
    if data.get("cost") is not None:
        txn.cost = data["cost"]
    if "plaid_category" in data:
        txn.plaid_category = data["plaid_category"]
    if data.get("time") is not None:
        txn.time = data["time"]
    db.add(txn)
    db.commit()
    db.refresh(txn)
    return txn


@router.delete("/{txn_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(txn_id: int, current_user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    txn = _get_owned_transaction(db, current_user, txn_id)
    db.delete(txn)
    db.commit()
    return None
