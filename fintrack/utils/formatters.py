"""
Currency, date and confidence display helpers.

Amounts are whole Indian rupees; every write path goes through
``round_amount`` so that stored values agree with what clients display.
"""
from __future__ import annotations

import math
from datetime import date, datetime
from typing import Optional, Union

CURRENCY_SYMBOL = "₹"

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

DateLike = Union[date, datetime]


def round_amount(value: float) -> int:
    """Round half up to whole currency units (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_currency(amount: float) -> str:
    """Format as INR with Indian digit grouping, e.g. ``₹1,23,456.00``."""
    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")
    return f"{sign}{CURRENCY_SYMBOL}{_group_indian(whole)}.{fraction}"


def format_date(value: Optional[DateLike], long: bool = False) -> str:
    if value is None:
        return "Not detected"
    if long:
        text = f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"
        if isinstance(value, datetime):
            hour = value.hour % 12 or 12
            meridiem = "AM" if value.hour < 12 else "PM"
            text += f", {hour:02d}:{value.minute:02d} {meridiem}"
        return text
    return f"{MONTH_NAMES[value.month - 1][:3]} {value.day}, {value.year}"


def format_date_input(value: DateLike) -> str:
    return value.strftime("%Y-%m-%d")


def format_day_label(value: DateLike) -> str:
    return f"{MONTH_NAMES[value.month - 1][:3]} {value.day}"


def format_month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1][:3]} {year}"


def month_name(index: int) -> str:
    """0-based month index -> English month name."""
    return MONTH_NAMES[index]


def truncate_text(text: Optional[str], max_length: int = 50) -> str:
    if not text:
        return "No description"
    if len(text) > max_length:
        return f"{text[:max_length]}..."
    return text


def amount_prefix(transaction_type: str) -> str:
    return "+" if transaction_type == "income" else "-"


# ---------------------------------------------------------------------------
# OCR confidence
# ---------------------------------------------------------------------------

def confidence_level(confidence: float) -> str:
    if confidence >= 0.8:
        return "High"
    if confidence >= 0.6:
        return "Medium"
    return "Low"


def confidence_text(confidence: float, full: bool = True) -> str:
    level = confidence_level(confidence)
    return f"{level} Confidence" if full else level


def confidence_percentage(confidence: float) -> str:
    return f"{round_amount(confidence * 100)}%"
