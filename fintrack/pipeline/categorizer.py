"""
Rule‑based transaction categorizer.

Merchant name and item names are folded into one lowercase text blob and
checked against keyword groups in a fixed priority order. The first group
that matches wins, so a blob hitting both a dining and a shopping keyword is
``Food & Dining``.
"""
from __future__ import annotations

import re
from typing import Any, Iterable, Optional

OTHER = "Other"

# Checked top to bottom; order is the tie-break.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Food & Dining", (
        "restaurant", "cafe", "coffee", "food", "pizza", "burger",
        "kitchen", "dining", "meal", "lunch", "dinner", "breakfast",
    )),
    ("Groceries", (
        "grocery", "supermarket", "market", "store", "shop", "mart",
        "fresh", "vegetables", "fruits", "milk", "bread",
    )),
    ("Transportation", (
        "gas", "fuel", "petrol", "diesel", "uber", "taxi", "bus",
        "train", "metro", "transport", "parking",
    )),
    ("Shopping", (
        "mall", "shopping", "retail", "clothes", "fashion",
        "electronics", "amazon", "flipkart",
    )),
    ("Healthcare", (
        "pharmacy", "medical", "hospital", "clinic", "doctor",
        "medicine", "health",
    )),
    ("Entertainment", (
        "movie", "cinema", "theater", "entertainment", "game", "sports",
        "gym", "fitness",
    )),
    ("Utilities", (
        "electric", "electricity", "water", "gas", "internet", "phone",
        "mobile", "utility",
    )),
)

_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    (category, re.compile("|".join(re.escape(k) for k in keywords)))
    for category, keywords in CATEGORY_KEYWORDS
]

CATEGORIES: tuple[str, ...] = tuple(c for c, _ in CATEGORY_KEYWORDS) + (OTHER,)


def _item_name(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        return item.get("name") or ""
    return getattr(item, "name", "") or ""


def categorize(merchant: Optional[str], items: Optional[Iterable[Any]] = None) -> str:
    """Return exactly one category from ``CATEGORIES``."""
    names = [_item_name(item) for item in (items or [])]
    if not merchant and not names:
        return OTHER

    items_text = " ".join(name.lower() for name in names)
    blob = f"{(merchant or '').lower()} {items_text}"

    for category, pattern in _PATTERNS:
        if pattern.search(blob):
            return category
    return OTHER
