# app/schemas/scanner.py
# Field names are camelCase: this is the wire format the receipt scanner page speaks.
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

class ScanImageRequest(BaseModel):
    imageBase64: str = Field(..., min_length=1)

class CategorizeTextRequest(BaseModel):
    text: str

class CategorizedItemOut(BaseModel):
    item: str
    amount: float
    category: str
    confidence: float

class ScanResponse(BaseModel):
    success: bool
    message: str
    extractedText: Optional[str] = None
    categorizedItems: Optional[List[CategorizedItemOut]] = None
    totalAmount: Optional[float] = None
    categoriesCreated: Optional[List[str]] = None

class CategoryList(BaseModel):
    categories: List[str]

class CategorizedItemIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    item: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    category: str = Field(..., min_length=1, max_length=100)
    confidence: Optional[float] = Field(None, ge=0, le=1)

class SaveItemsRequest(BaseModel):
    categorizedItems: List[CategorizedItemIn] = Field(..., min_length=1)

class SaveItemsResponse(BaseModel):
    created: int
    ids: List[int]
    categoriesCreated: List[str]
