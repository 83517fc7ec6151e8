"""
Transaction API endpoints.

GET    /api/transactions        — list the user's transactions (newest first)
POST   /api/transactions        — create a transaction
GET    /api/transactions/{id}   — get one transaction
PUT    /api/transactions/{id}   — partially update a transaction
DELETE /api/transactions/{id}   — delete a transaction
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fintrack import store
from fintrack.auth import get_current_user_id
from fintrack.database import get_db
from fintrack.schemas import (
    MessageResponse,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter()


# ── GET /api/transactions ────────────────────────────────────────────────
@router.get("/transactions", response_model=List[Transaction])
def list_transactions(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    rows = store.list_transactions(db, user_id)
    return [store.to_transaction(r) for r in rows]


# ── POST /api/transactions ───────────────────────────────────────────────
@router.post("/transactions", response_model=Transaction, status_code=201)
def create_transaction(
    req: TransactionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    row = store.create_transaction(db, user_id, req)
    return store.to_transaction(row)


# ── GET /api/transactions/{transaction_id} ───────────────────────────────
@router.get("/transactions/{transaction_id}", response_model=Transaction)
def get_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return store.to_transaction(store.get_transaction(db, user_id, transaction_id))


# ── PUT /api/transactions/{transaction_id} ───────────────────────────────
@router.put("/transactions/{transaction_id}", response_model=Transaction)
def update_transaction(
    transaction_id: str,
    req: TransactionUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    row = store.update_transaction(db, user_id, transaction_id, req)
    return store.to_transaction(row)


# ── DELETE /api/transactions/{transaction_id} ────────────────────────────
@router.delete("/transactions/{transaction_id}", response_model=MessageResponse)
def delete_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    store.delete_transaction(db, user_id, transaction_id)
    return MessageResponse(message="Transaction deleted")
