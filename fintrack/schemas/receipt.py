"""
Receipt schemas: OCR analysis input, extraction output and the metadata
sidecar persisted on transactions.
"""
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from fintrack.schemas.base import CamelModel


# ---------------------------------------------------------------------------
# Document analysis result (normalized from the OCR service)
# ---------------------------------------------------------------------------

class ReceiptField(BaseModel):
    """One field of an analyzed receipt.

    Scalar fields carry ``content``; list fields (``Items``) carry ``values``;
    object fields (a single item) carry ``properties``.
    """
    content: Optional[str] = None
    confidence: Optional[float] = None
    values: list[ReceiptField] = Field(default_factory=list)
    properties: dict[str, ReceiptField] = Field(default_factory=dict)


class AnalyzedReceipt(BaseModel):
    doc_type: str = "receipt"
    fields: dict[str, ReceiptField] = Field(default_factory=dict)


class AnalyzeResult(BaseModel):
    documents: list[AnalyzedReceipt] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Extraction output
# ---------------------------------------------------------------------------

class ReceiptItem(CamelModel):
    name: str
    price: Optional[float] = None


class Confidence(CamelModel):
    """OCR certainty per field; informational only."""
    merchant: float = Field(default=0, ge=0, le=1)
    total: float = Field(default=0, ge=0, le=1)
    date: float = Field(default=0, ge=0, le=1)

    @field_validator("merchant", "total", "date", mode="before")
    @classmethod
    def _missing_is_zero(cls, value):
        return 0 if value is None else value


class RawReceiptExtraction(CamelModel):
    merchant: Optional[str] = None
    transaction_date: Optional[datetime] = None
    total: Optional[int] = None
    items: list[ReceiptItem] = Field(default_factory=list)
    description: str = ""
    category: str = "Other"
    type: Literal["expense"] = "expense"
    confidence: Confidence = Field(default_factory=Confidence)


# ---------------------------------------------------------------------------
# Transaction sidecar
# ---------------------------------------------------------------------------

class ReceiptMetadataIn(CamelModel):
    """Receipt data supplied with a create/update request.

    Accepts a full ``RawReceiptExtraction`` payload as well; only the
    receipt-specific keys are kept. An explicit ``hasReceipt: false`` (as
    returned for a transaction without a receipt) clears the sidecar.
    """
    has_receipt: Optional[bool] = None
    merchant: Optional[str] = None
    transaction_date: Optional[datetime] = None
    items: Optional[list[ReceiptItem]] = None
    confidence: Optional[Confidence] = None


class ReceiptMetadata(CamelModel):
    has_receipt: bool = False
    merchant: Optional[str] = None
    transaction_date: Optional[datetime] = None
    items: list[ReceiptItem] = Field(default_factory=list)
    confidence: Optional[Confidence] = None


class ReceiptUploadResponse(CamelModel):
    success: bool = True
    message: str = "Receipt analyzed successfully"
    data: RawReceiptExtraction
