"""
Report schemas produced by the transaction aggregator.
"""
from __future__ import annotations

import datetime as dt

from pydantic import Field

from fintrack.schemas.base import CamelModel
from fintrack.schemas.transaction import Transaction


class SummaryStats(CamelModel):
    total_income: int = 0
    total_expenses: int = 0
    balance: int = 0
    count: int = 0


class CategoryTotal(CamelModel):
    name: str
    value: int
    count: int


class MonthlyTotals(CamelModel):
    month: str = Field(..., description="YYYY-MM")
    label: str = Field(..., description="e.g. 'Jan 2025'")
    income: int = 0
    expenses: int = 0


class DailyTotals(CamelModel):
    date: dt.date
    day: str = Field(..., description="e.g. 'Jan 5'")
    income: int = 0
    expenses: int = 0
    balance: int = 0
    running_balance: int = 0


class MonthlyReport(CamelModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    summary: SummaryStats
    categories: list[CategoryTotal] = Field(default_factory=list)
    monthly: list[MonthlyTotals] = Field(default_factory=list)
    daily: list[DailyTotals] = Field(default_factory=list)


class DashboardSummary(CamelModel):
    """All-time totals plus the newest transactions."""
    summary: SummaryStats
    categories: list[CategoryTotal] = Field(default_factory=list)
    recent: list[Transaction] = Field(default_factory=list)
