"""
Reporting: pure aggregation over a user's transactions.
"""
from fintrack.reports.aggregator import (  # noqa: F401
    build_report,
    category_breakdown,
    daily_series,
    filter_by_month,
    filter_by_type,
    monthly_series,
    summarize,
    to_csv,
)
