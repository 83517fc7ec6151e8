"""
Transaction request / response schemas.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from fintrack.schemas.base import CamelModel, RequestModel
from fintrack.schemas.receipt import ReceiptMetadata, ReceiptMetadataIn
from fintrack.utils.formatters import round_amount


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


# Largest value a signed 64-bit INTEGER column holds
MAX_AMOUNT = 2**63 - 1


def _positive_whole_amount(value: float) -> int:
    """Round to whole currency units; the stored amount must stay above zero."""
    if value <= 0 or round_amount(value) <= 0:
        raise ValueError("Amount must be greater than 0")
    amount = round_amount(value)
    if amount > MAX_AMOUNT:
        raise ValueError("Amount is too large")
    return amount


class TransactionCreate(RequestModel):
    type: TransactionType
    amount: float = Field(..., allow_inf_nan=False)
    category: str
    description: Optional[str] = None
    date: Optional[datetime] = None
    receipt_metadata: Optional[ReceiptMetadataIn] = None

    @field_validator("amount")
    @classmethod
    def _amount(cls, value: float) -> int:
        return _positive_whole_amount(value)

    @field_validator("category")
    @classmethod
    def _category(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Category must not be empty")
        return value


class TransactionUpdate(RequestModel):
    """Partial update; only the keys present in the request are applied."""
    type: Optional[TransactionType] = None
    amount: Optional[float] = Field(default=None, allow_inf_nan=False)
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    receipt_metadata: Optional[ReceiptMetadataIn] = None

    @field_validator("amount")
    @classmethod
    def _amount(cls, value: Optional[float]) -> Optional[int]:
        if value is None:
            return None
        return _positive_whole_amount(value)

    @field_validator("category")
    @classmethod
    def _category(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Category must not be empty")
        return value


class Transaction(CamelModel):
    id: str
    type: TransactionType
    amount: int
    currency: str
    category: str
    description: str = ""
    date: datetime
    owner_id: str
    receipt_metadata: ReceiptMetadata = Field(default_factory=ReceiptMetadata)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReceiptTransactionResponse(CamelModel):
    success: bool = True
    message: str = "Transaction created successfully from receipt"
    data: Transaction
