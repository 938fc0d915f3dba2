# app/schemas/analytics.py
from datetime import date
from pydantic import BaseModel
from typing import List, Optional

class CategorySpend(BaseModel):
    category_id: Optional[int] = None
    category: str
    spent: float
    budget: Optional[float] = None
    remaining: Optional[float] = None
    percent_used: Optional[float] = None

class BudgetSummary(BaseModel):
    total_spent: float
    total_budget: Optional[float] = None
    remaining: Optional[float] = None
    percent_used: Optional[float] = None
    categories: List[CategorySpend]

class DailySpend(BaseModel):
    date: date
    total: float
