# app/api/v1/scanner.py
import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.deps import get_current_user
from app.db import models
from app.db.session import get_db
from app.schemas.scanner import (
    CategorizeTextRequest,
    CategoryList,
    SaveItemsRequest,
    SaveItemsResponse,
    ScanImageRequest,
    ScanResponse,
)
from app.services.categorizer import ScanResult, available_categories, categorize_receipt_text
from app.services.ocr import OcrError, OcrProviderError, get_ocr_provider

logger = logging.getLogger(__name__)
router = APIRouter(tags=["scanner"])


def _success(result: ScanResult, extracted_text: str) -> Dict:
    return {
        "success": True,
        "message": f"Successfully processed receipt with {len(result.categorized_items)} items",
        "extractedText": extracted_text,
        **result.to_dict(),
    }


@router.post("/scan-image", response_model=ScanResponse, response_model_exclude_none=True)
async def scan_receipt_image(payload: ScanImageRequest, current_user: models.User = Depends(get_current_user)):
    """
    OCR the image, then categorize the text. OCR failures are reported in the
    body as {"success": false, "message": ...} rather than as an HTTP error.
    """
    try:
        provider = get_ocr_provider()
        extracted_text = await provider.extract_text(payload.imageBase64)
    except OcrError as exc:
        extra = {"user_id": current_user.id}
        if isinstance(exc, OcrProviderError):
            extra["provider_status"] = exc.status_code
        logger.warning("Receipt OCR failed: %s", exc, extra={"extra_data": extra})
        return {"success": False, "message": f"Error processing receipt: {exc}"}

    result = categorize_receipt_text(extracted_text)
    logger.info(
        "Receipt scanned",
        extra={"extra_data": {"user_id": current_user.id, "items_count": len(result.categorized_items)}},
    )
    return _success(result, extracted_text)


@router.post("/categorize-text", response_model=ScanResponse, response_model_exclude_none=True)
def categorize_text(payload: CategorizeTextRequest, current_user: models.User = Depends(get_current_user)):
    """Same as scan-image for text that was already extracted."""
    return _success(categorize_receipt_text(payload.text), payload.text)


@router.get("/categories", response_model=CategoryList)
def list_scanner_categories(current_user: models.User = Depends(get_current_user)):
    return {"categories": available_categories()}


@router.post("/save", response_model=SaveItemsResponse, status_code=status.HTTP_201_CREATED)
def save_categorized_items(
    payload: SaveItemsRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Persist scanned items as transactions of the current user. Categories are
    matched by name (case-insensitive) and created when missing.
    """
    by_name: Dict[str, models.SpendingCategory] = {}
    created_names = []
    transactions = []
    try:
        for entry in payload.categorizedItems:
            key = entry.category.strip().lower()
            cat = by_name.get(key)
            if cat is None:
                cat = (
                    db.query(models.SpendingCategory)
                    .filter(
                        models.SpendingCategory.user_id == current_user.id,
                        func.lower(models.SpendingCategory.name) == key,
                    )
                    .first()
                )
            if cat is None:
                cat = models.SpendingCategory(user_id=current_user.id, name=entry.category.strip())
                db.add(cat)
                db.flush()
                created_names.append(cat.name)
            by_name[key] = cat

            txn = models.Transaction(
                user_id=current_user.id,
                item_purchased=entry.item,
                cost=entry.amount,
                category_id=cat.id,
            )
            db.add(txn)
            transactions.append(txn)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to save scanned items for user %s", current_user.id)
        raise HTTPException(status_code=500, detail="Failed to save scanned items")

    for t in transactions:
        db.refresh(t)
    logger.info("saved %d scanned items for user %s", len(transactions), current_user.id)
    return {"created": len(transactions), "ids": [t.id for t in transactions], "categoriesCreated": created_names}
