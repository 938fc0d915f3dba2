# app/schemas/category.py
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional

class SpendingCategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    total_budget_percent: Optional[Decimal] = Field(None, ge=0, le=100, max_digits=5, decimal_places=2)
    total_budget_number: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)

class SpendingCategoryCreate(SpendingCategoryBase):
    pass

class SpendingCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    total_budget_percent: Optional[Decimal] = Field(None, ge=0, le=100, max_digits=5, decimal_places=2)
    total_budget_number: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)

class SpendingCategoryOut(BaseModel):
    id: int
    user_id: int
    name: str
    total_budget_percent: Optional[float] = None
    total_budget_number: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
