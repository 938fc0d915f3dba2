# app/schemas/transaction.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from decimal import Decimal

class TransactionCreate(BaseModel):
    item_purchased: str = Field(..., min_length=1, max_length=255)
    cost: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None
    plaid_category: Optional[str] = Field(None, max_length=255)
    time: Optional[datetime] = None

class TransactionUpdate(BaseModel):
    item_purchased: Optional[str] = Field(None, min_length=1, max_length=255)
    cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None
    plaid_category: Optional[str] = Field(None, max_length=255)
    time: Optional[datetime] = None

class CategoryRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

class TransactionOut(BaseModel):
    id: int
    user_id: int
    item_purchased: str
    cost: float
    time: datetime
    plaid_category: Optional[str] = None
    category_id: Optional[int] = None
    category: Optional[CategoryRef] = None

    class Config:
        from_attributes = True

class TransactionList(BaseModel):
    items: List[TransactionOut]
    total: int
    page: int
    per_page: int
