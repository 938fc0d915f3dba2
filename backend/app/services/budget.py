# app/services/budget.py
"""Spend-vs-budget aggregation over a user's transactions."""
import logging
from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db import models

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"
_CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def category_budget(category: models.SpendingCategory, user: models.User) -> Optional[Decimal]:
    """
    Fixed amount wins; otherwise the percentage is applied to the user's
    total budget (or income when no total budget is set).
    """
    if category.total_budget_number is not None:
        return _money(category.total_budget_number)
    if category.total_budget_percent is not None:
        base = user.total_budget if user.total_budget is not None else user.income
        if base is not None:
            return _money(Decimal(str(base)) * Decimal(str(category.total_budget_percent)) / Decimal(100))
    return None


def _percent(spent: Decimal, budget: Optional[Decimal]) -> Optional[float]:
    if budget is None or budget == 0:
        return None
    return float((spent * 100 / budget).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _filtered(q, start_date: Optional[date], end_date: Optional[date]):
    if start_date:
        q = q.filter(models.Transaction.time >= datetime.combine(start_date, time.min))
    if end_date:
        q = q.filter(models.Transaction.time <= datetime.combine(end_date, time.max))
    return q


def spend_by_category(
    db: Session,
    user: models.User,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[Dict]:
    """One row per spending category of the user (zero spend included), plus
    an Uncategorized row when there is spending without a category."""
    q = db.query(models.Transaction.category_id, func.sum(models.Transaction.cost).label("total")) \
        .filter(models.Transaction.user_id == user.id)
    q = _filtered(q, start_date, end_date).group_by(models.Transaction.category_id)
    spent_by_id = {row.category_id: _money(row.total) for row in q.all()}

    categories = (
        db.query(models.SpendingCategory)
        .filter(models.SpendingCategory.user_id == user.id)
        .order_by(models.SpendingCategory.name)
        .all()
    )

    rows = []
    for cat in categories:
        spent = spent_by_id.get(cat.id, _money(0))
        budget = category_budget(cat, user)
        rows.append({
            "category_id": cat.id,
            "category": cat.name,
            "spent": float(spent),
            "budget": _as_float(budget),
            "remaining": _as_float(budget - spent) if budget is not None else None,
            "percent_used": _percent(spent, budget),
        })

    uncategorized = spent_by_id.get(None)
    if uncategorized:
        rows.append({
            "category_id": None,
            "category": UNCATEGORIZED,
            "spent": float(uncategorized),
            "budget": None,
            "remaining": None,
            "percent_used": None,
        })
    return rows


def budget_summary(
    db: Session,
    user: models.User,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Dict:
    rows = spend_by_category(db, user, start_date, end_date)
    total_spent = sum((Decimal(str(r["spent"])) for r in rows), Decimal(0))

    if user.total_budget is not None:
        total_budget = _money(user.total_budget)
    else:
        budgets = [Decimal(str(r["budget"])) for r in rows if r["budget"] is not None]
        total_budget = _money(sum(budgets)) if budgets else None

    total_spent = _money(total_spent)
    logger.debug("budget summary for user %s: spent=%s budget=%s", user.id, total_spent, total_budget)
    return {
        "total_spent": float(total_spent),
        "total_budget": _as_float(total_budget),
        "remaining": _as_float(total_budget - total_spent) if total_budget is not None else None,
        "percent_used": _percent(total_spent, total_budget),
        "categories": rows,
    }


def spend_by_date(
    db: Session,
    user: models.User,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[Dict]:
    day = func.date(models.Transaction.time)
    q = db.query(day.label("day"), func.sum(models.Transaction.cost).label("total")) \
        .filter(models.Transaction.user_id == user.id)
    q = _filtered(q, start_date, end_date).group_by(day).order_by(day)
    return [{"date": r.day, "total": float(_money(r.total))} for r in q.all()]
