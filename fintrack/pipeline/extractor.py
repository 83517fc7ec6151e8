"""
Receipt field extractor.

Normalizes the prebuilt-receipt analysis of one document into a
``RawReceiptExtraction`` that a client can use to pre-fill a transaction.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Optional

from dateutil import parser as date_parser

from fintrack.errors import ExtractionEmptyError
from fintrack.pipeline.categorizer import categorize
from fintrack.schemas import (
    AnalyzedReceipt,
    AnalyzeResult,
    Confidence,
    RawReceiptExtraction,
    ReceiptField,
    ReceiptItem,
)
from fintrack.utils.formatters import round_amount

logger = logging.getLogger(__name__)

ITEM_FALLBACK_NAME = "Item"
MAX_DESCRIPTION_LENGTH = 200

_NON_NUMERIC = re.compile(r"[^\d.-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _content(field: Optional[ReceiptField]) -> Optional[str]:
    if field is None or not field.content:
        return None
    return field.content


def _confidence(field: Optional[ReceiptField]) -> float:
    if field is None or not field.confidence:
        return 0.0
    return field.confidence


def parse_number(text: Optional[str]) -> Optional[float]:
    """Strip everything but digits, '.' and '-' and read the leading number.

    ``"$45.60"`` -> 45.6, ``"—"`` -> None.
    """
    if not text:
        return None
    cleaned = _NON_NUMERIC.sub("", str(text))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None
    return float(match.group())


def parse_total(text: Optional[str]) -> Optional[int]:
    value = parse_number(text)
    if value is None or value <= 0:
        return None
    return round_amount(value)


def parse_receipt_date(text: Optional[str]) -> Optional[datetime]:
    if not text:
        return None
    try:
        return date_parser.parse(text)
    except (ValueError, OverflowError):
        logger.info("Ignoring unparseable receipt date: %r", text)
        return None


def _merchant(fields: dict[str, ReceiptField]) -> Optional[str]:
    name = _content(fields.get("MerchantName"))
    if name:
        return name
    address = _content(fields.get("MerchantAddress"))
    if address:
        return address.split("\n")[0] or None
    return None


def _items(fields: dict[str, ReceiptField]) -> list[ReceiptItem]:
    items_field = fields.get("Items")
    if items_field is None:
        return []

    items: list[ReceiptItem] = []
    for entry in items_field.values:
        props = entry.properties
        name = (
            _content(props.get("Description"))
            or _content(props.get("Name"))
            or ITEM_FALLBACK_NAME
        ).strip()
        if not name or name == ITEM_FALLBACK_NAME:
            continue
        price_text = _content(props.get("Price")) or _content(props.get("TotalPrice"))
        items.append(ReceiptItem(name=name, price=parse_number(price_text)))
    return items


def _description(items: list[ReceiptItem], merchant: Optional[str]) -> str:
    if items:
        text = ", ".join(item.name for item in items)
    elif merchant:
        text = f"Purchase from {merchant}"
    else:
        text = ""
    return text[:MAX_DESCRIPTION_LENGTH]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_receipt(document: AnalyzedReceipt) -> RawReceiptExtraction:
    """Map one analyzed receipt document onto the extraction shape."""
    fields = document.fields
    merchant = _merchant(fields)
    items = _items(fields)

    return RawReceiptExtraction(
        merchant=merchant,
        transaction_date=parse_receipt_date(_content(fields.get("TransactionDate"))),
        total=parse_total(_content(fields.get("Total"))),
        items=items,
        description=_description(items, merchant),
        category=categorize(merchant, items),
        type="expense",
        confidence=Confidence(
            merchant=_confidence(fields.get("MerchantName")),
            total=_confidence(fields.get("Total")),
            date=_confidence(fields.get("TransactionDate")),
        ),
    )


def extract_from_result(result: Optional[AnalyzeResult]) -> RawReceiptExtraction:
    """Extract the first document of an analysis result.

    Raises ``ExtractionEmptyError`` when the service returned nothing usable.
    """
    if result is None or not result.documents or not result.documents[0].fields:
        raise ExtractionEmptyError(
            "Could not extract data from the receipt. "
            "Please ensure the image is clear and contains a valid receipt."
        )
    if len(result.documents) > 1:
        logger.info("Analysis returned %d documents; using the first", len(result.documents))
    return extract_receipt(result.documents[0])
