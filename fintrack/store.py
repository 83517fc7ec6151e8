"""
Transaction store — owner-scoped CRUD over ``TransactionModel``.

Every function takes the acting user's id explicitly; a row is only ever
visible to, or mutable by, the user that owns it. A lookup that misses and a
lookup that hits somebody else's row are indistinguishable to the caller.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from fintrack.config import settings
from fintrack.errors import NotFoundError
from fintrack.models.transaction import TransactionModel
from fintrack.schemas import (
    ReceiptMetadata,
    ReceiptMetadataIn,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Transaction not found"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def normalize_receipt_metadata(meta: Optional[ReceiptMetadataIn]) -> dict:
    """JSON-ready sidecar; ``None`` or ``hasReceipt: false`` means no receipt."""
    if meta is None or meta.has_receipt is False:
        return {"hasReceipt": False}
    return ReceiptMetadata(
        has_receipt=True,
        merchant=meta.merchant or None,
        transaction_date=meta.transaction_date,
        items=meta.items or [],
        confidence=meta.confidence or {},
    ).model_dump(mode="json", by_alias=True)


def to_transaction(row: TransactionModel) -> Transaction:
    return Transaction(
        id=row.id,
        type=row.type,
        amount=row.amount,
        currency=row.currency,
        category=row.category,
        description=row.description or "",
        date=row.date,
        owner_id=row.owner_id,
        receipt_metadata=ReceiptMetadata.model_validate(
            row.receipt_metadata or {"hasReceipt": False}
        ),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _owned(db: Session, owner_id: str, transaction_id: str) -> TransactionModel:
    row = (
        db.query(TransactionModel)
        .filter(
            TransactionModel.id == transaction_id,
            TransactionModel.owner_id == owner_id,
        )
        .first()
    )
    if row is None:
        logger.warning("Transaction %s not found for user %s", transaction_id, owner_id)
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return row


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

def list_transactions(db: Session, owner_id: str) -> list[TransactionModel]:
    """All of the user's transactions, newest ``date`` first."""
    rows = (
        db.query(TransactionModel)
        .filter(TransactionModel.owner_id == owner_id)
        .order_by(TransactionModel.date.desc())
        .all()
    )
    logger.info("Found %d transactions for user %s", len(rows), owner_id)
    return rows


def get_transaction(db: Session, owner_id: str, transaction_id: str) -> TransactionModel:
    return _owned(db, owner_id, transaction_id)


def create_transaction(
    db: Session, owner_id: str, payload: TransactionCreate
) -> TransactionModel:
    row = TransactionModel(
        id=str(uuid.uuid4()),
        owner_id=owner_id,
        type=payload.type.value,
        amount=payload.amount,
        currency=settings.CURRENCY,
        category=payload.category,
        description=payload.description or "",
        date=_naive_utc(payload.date) if payload.date else _utcnow(),
        receipt_metadata=normalize_receipt_metadata(payload.receipt_metadata),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(
        "Created transaction %s (%s %d, receipt=%s) for user %s",
        row.id, row.type, row.amount, row.receipt_metadata["hasReceipt"], owner_id,
    )
    return row


def update_transaction(
    db: Session, owner_id: str, transaction_id: str, patch: TransactionUpdate
) -> TransactionModel:
    """Apply the fields present in ``patch``; owner and id never change."""
    row = _owned(db, owner_id, transaction_id)

    for name in patch.model_fields_set:
        value = getattr(patch, name)
        if name == "receipt_metadata":
            row.receipt_metadata = normalize_receipt_metadata(value)
        elif name == "description":
            row.description = value or ""
        elif value is None:
            # null for a required column leaves it unchanged
            continue
        elif name == "type":
            row.type = value.value
        elif name == "date":
            row.date = _naive_utc(value)
        else:
            setattr(row, name, value)
    row.currency = settings.CURRENCY

    db.commit()
    db.refresh(row)
    logger.info("Updated transaction %s for user %s", row.id, owner_id)
    return row


def delete_transaction(db: Session, owner_id: str, transaction_id: str) -> None:
    row = _owned(db, owner_id, transaction_id)
    db.delete(row)
    db.commit()
    logger.info("Deleted transaction %s for user %s", transaction_id, owner_id)
