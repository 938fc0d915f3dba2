# app/schemas/auth.py
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")


def clean_money(value: Any) -> Optional[Decimal]:
    """'$ 1,233.50' -> Decimal('1233.50'); blank or unparsable input -> None."""
    if value is None or isinstance(value, bool):
        return None
    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    try:
        num = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not num.is_finite():
        return None
    return num.quantize(Decimal("0.01"))


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: Optional[str] = Field(None, max_length=100)
    income: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    total_budget: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    current_total: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)

class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    name: Optional[str] = Field(None, max_length=100)
    income: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    total_budget: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    current_total: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)

class UserOut(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    income: Optional[float] = None
    total_budget: Optional[float] = None
    current_total: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class AuthResponse(Token):
    user: UserOut

class SeedCategory(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    # the signup wizard sends free-form strings such as "$ 233" or "15%"
    total_budget_number: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    total_budget_percent: Optional[Decimal] = Field(None, ge=0, le=100, max_digits=5, decimal_places=2)

    @field_validator("total_budget_number", "total_budget_percent", mode="before")
    @classmethod
    def _clean(cls, v):
        return clean_money(v)

class SignupSeedRequest(BaseModel):
    user: UserCreate
    categories: List[SeedCategory] = []
