"""
Receipt API endpoints.

POST /api/receipts/upload              — analyze a receipt image/PDF → draft
POST /api/receipts/create-transaction  — persist a confirmed draft
"""
from __future__ import annotations

import logging
from functools import partial
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from fintrack import store
from fintrack.auth import get_current_user_id
from fintrack.config import settings
from fintrack.database import get_db
from fintrack.pipeline import analyze_receipt_upload
from fintrack.schemas import (
    ReceiptTransactionResponse,
    ReceiptUploadResponse,
    TransactionCreate,
)
from fintrack.services.ocr import AnalyzerFactory, ReceiptAnalyzer

logger = logging.getLogger(__name__)
router = APIRouter()


def get_analyzer_factory() -> AnalyzerFactory:
    """Dependency returning a builder for the OCR analyzer.

    The analyzer is only built once the upload has been validated, so a bad
    file never reaches the configuration check or the service.
    """
    return partial(ReceiptAnalyzer.from_settings, settings)


# ── POST /api/receipts/upload ────────────────────────────────────────────
@router.post("/receipts/upload", response_model=ReceiptUploadResponse)
async def upload_receipt(
    receipt: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user_id),
    make_analyzer: AnalyzerFactory = Depends(get_analyzer_factory),
):
    logger.info(
        "Receipt upload started by %s, file: %s",
        user_id, receipt.filename if receipt else None,
    )
    extraction = await analyze_receipt_upload(
        receipt,
        make_analyzer,
        settings.UPLOAD_DIR,
        settings.MAX_UPLOAD_BYTES,
    )
    return ReceiptUploadResponse(data=extraction)


# ── POST /api/receipts/create-transaction ────────────────────────────────
@router.post(
    "/receipts/create-transaction",
    response_model=ReceiptTransactionResponse,
    status_code=201,
)
def create_transaction_from_receipt(
    req: TransactionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    row = store.create_transaction(db, user_id, req)
    return ReceiptTransactionResponse(data=store.to_transaction(row))
