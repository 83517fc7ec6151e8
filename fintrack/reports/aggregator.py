"""
Transaction aggregation for dashboards and monthly reports.

All functions are pure: the output depends only on the transactions passed
in (their ``type``, ``amount``, ``category`` and ``date``), never on the
clock. Transactions may be ORM rows, ``Transaction`` schemas or plain dicts.
"""
from __future__ import annotations

import calendar
import csv
import io
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Sequence

from fintrack.schemas import (
    CategoryTotal,
    DailyTotals,
    MonthlyReport,
    MonthlyTotals,
    SummaryStats,
)
from fintrack.utils.formatters import format_day_label, format_month_label

INCOME = "income"
EXPENSE = "expense"

CSV_COLUMNS = ["Date", "Type", "Category", "Description", "Amount"]


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------

def _get(tx: Any, name: str) -> Any:
    if isinstance(tx, dict):
        return tx.get(name)
    return getattr(tx, name, None)


def _type(tx: Any) -> str:
    value = _get(tx, "type")
    # TransactionType is a str enum
    return getattr(value, "value", value)


def _date(tx: Any) -> date:
    value = _get(tx, "date")
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return value.date()
    return value


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def filter_by_month(transactions: Iterable[Any], year: int, month: int) -> list[Any]:
    """Keep transactions dated inside ``year``/``month`` (1-12)."""
    result = []
    for tx in transactions:
        day = _date(tx)
        if day.year == year and day.month == month:
            result.append(tx)
    return result


def filter_by_type(transactions: Iterable[Any], tx_type: str = "all") -> list[Any]:
    if tx_type == "all":
        return list(transactions)
    return [tx for tx in transactions if _type(tx) == tx_type]


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

def summarize(transactions: Sequence[Any]) -> SummaryStats:
    total_income = sum(_get(tx, "amount") for tx in transactions if _type(tx) == INCOME)
    total_expenses = sum(_get(tx, "amount") for tx in transactions if _type(tx) == EXPENSE)
    return SummaryStats(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        count=len(transactions),
    )


def category_breakdown(transactions: Iterable[Any]) -> list[CategoryTotal]:
    """Expense totals per category, largest first."""
    totals: dict[str, CategoryTotal] = {}
    for tx in transactions:
        if _type(tx) != EXPENSE:
            continue
        category = _get(tx, "category")
        entry = totals.get(category)
        if entry is None:
            totals[category] = CategoryTotal(name=category, value=_get(tx, "amount"), count=1)
        else:
            entry.value += _get(tx, "amount")
            entry.count += 1
    # sorted() is stable: equal totals keep first-seen order
    return sorted(totals.values(), key=lambda c: c.value, reverse=True)


def monthly_series(transactions: Iterable[Any]) -> list[MonthlyTotals]:
    """Income and expense totals per calendar month, oldest first."""
    buckets: dict[tuple[int, int], MonthlyTotals] = {}
    for tx in transactions:
        day = _date(tx)
        key = (day.year, day.month)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = MonthlyTotals(
                month=f"{day.year:04d}-{day.month:02d}",
                label=format_month_label(day.year, day.month),
            )
            buckets[key] = bucket
        if _type(tx) == INCOME:
            bucket.income += _get(tx, "amount")
        else:
            bucket.expenses += _get(tx, "amount")
    return [buckets[key] for key in sorted(buckets)]


def daily_series(transactions: Iterable[Any], year: int, month: int) -> list[DailyTotals]:
    """One bucket per day of the month with a running balance.

    The running balance starts at zero on the 1st; nothing carries over from
    earlier months. Transactions outside the month are ignored.
    """
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    buckets: dict[date, DailyTotals] = {}
    for offset in range(days_in_month):
        day = first + timedelta(days=offset)
        buckets[day] = DailyTotals(date=day, day=format_day_label(day))

    for tx in transactions:
        bucket = buckets.get(_date(tx))
        if bucket is None:
            continue
        if _type(tx) == INCOME:
            bucket.income += _get(tx, "amount")
        else:
            bucket.expenses += _get(tx, "amount")

    running = 0
    series = [buckets[day] for day in sorted(buckets)]
    for bucket in series:
        bucket.balance = bucket.income - bucket.expenses
        running += bucket.balance
        bucket.running_balance = running
    return series


def build_report(transactions: Iterable[Any], year: int, month: int) -> MonthlyReport:
    """Everything the reports page shows for one month."""
    in_month = filter_by_month(transactions, year, month)
    return MonthlyReport(
        year=year,
        month=month,
        summary=summarize(in_month),
        categories=category_breakdown(in_month),
        monthly=monthly_series(in_month),
        daily=daily_series(in_month, year, month),
    )


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------

def _csv_date(day: date) -> str:
    return f"{day.month}/{day.day}/{day.year}"


def to_csv(transactions: Iterable[Any]) -> str:
    """Render ``Date,Type,Category,Description,Amount`` rows."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for tx in transactions:
        writer.writerow([
            _csv_date(_date(tx)),
            _type(tx),
            _get(tx, "category"),
            _get(tx, "description") or "",
            _get(tx, "amount"),
        ])
    return buf.getvalue().rstrip("\n")
