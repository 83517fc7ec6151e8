"""
Report API endpoints.

GET /api/reports         — monthly summary, category, monthly and daily series
GET /api/reports/export  — the month's transactions as CSV
GET /api/reports/summary — all-time totals, categories and newest transactions
"""
from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from fintrack import store
from fintrack.auth import get_current_user_id
from fintrack.database import get_db
from fintrack.reports import (
    build_report,
    category_breakdown,
    filter_by_month,
    filter_by_type,
    summarize,
    to_csv,
)
from fintrack.schemas import DashboardSummary, MonthlyReport
from fintrack.utils.formatters import month_name

logger = logging.getLogger(__name__)
router = APIRouter()


# ── GET /api/reports ─────────────────────────────────────────────────────
@router.get("/reports", response_model=MonthlyReport)
def monthly_report(
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    rows = store.list_transactions(db, user_id)
    report = build_report(rows, year, month)
    logger.info(
        "Report %04d-%02d for %s: %d transactions",
        year, month, user_id, report.summary.count,
    )
    return report


# ── GET /api/reports/export ──────────────────────────────────────────────
@router.get("/reports/export")
def export_csv(
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
    type: Literal["all", "income", "expense"] = "all",
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    rows = filter_by_type(filter_by_month(store.list_transactions(db, user_id), year, month), type)
    filename = f"transactions-{month_name(month - 1)}-{year}.csv"
    logger.info("Exporting %d transactions to %s", len(rows), filename)
    return Response(
        content=to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ── GET /api/reports/summary ─────────────────────────────────────────────
@router.get("/reports/summary", response_model=DashboardSummary)
def dashboard_summary(
    recent: int = Query(5, ge=0, le=50),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    rows = store.list_transactions(db, user_id)
    logger.info("Dashboard summary for %s: %d transactions", user_id, len(rows))
    return DashboardSummary(
        summary=summarize(rows),
        categories=category_breakdown(rows),
        recent=[store.to_transaction(row) for row in rows[:recent]],
    )
