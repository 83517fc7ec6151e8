"""
Receipt ingestion pipeline.

Orchestrates: validate upload → stage temp file → analyze (OCR) → extract
fields → categorize. Nothing is persisted here; the client confirms the
draft and creates the transaction in a separate request.
"""
import logging
import os
import tempfile
from typing import Optional

from fastapi import UploadFile

from fintrack.config import settings
from fintrack.errors import ValidationError
from fintrack.pipeline.extractor import extract_from_result
from fintrack.schemas import RawReceiptExtraction
from fintrack.services.ocr import AnalyzerFactory

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "application/pdf",
})


def validate_upload(
    filename: Optional[str],
    content_type: Optional[str],
    size: int,
    max_bytes: int = settings.MAX_UPLOAD_BYTES,
) -> None:
    """Reject an upload before anything external is touched."""
    if not filename:
        raise ValidationError("No file uploaded")
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(
            "Invalid file type. Please upload an image (JPEG, PNG, GIF) or PDF file."
        )
    if size > max_bytes:
        raise ValidationError(
            f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
        )


async def analyze_receipt_upload(
    upload: Optional[UploadFile],
    make_analyzer: AnalyzerFactory,
    upload_dir: str,
    max_bytes: int = settings.MAX_UPLOAD_BYTES,
) -> RawReceiptExtraction:
    """Run one uploaded receipt through OCR and extraction.

    The staged temp file is removed whether analysis succeeds or fails.
    """
    if upload is None:
        raise ValidationError("No file uploaded")
    # Multipart parsing records the size; reject before reading into memory
    if upload.size is not None:
        validate_upload(upload.filename, upload.content_type, upload.size, max_bytes)
    data = await upload.read()
    validate_upload(upload.filename, upload.content_type, len(data), max_bytes)
    logger.info(
        "Receipt upload accepted: %s (%s, %d bytes)",
        upload.filename, upload.content_type, len(data),
    )

    os.makedirs(upload_dir, exist_ok=True)
    suffix = os.path.splitext(upload.filename)[1]
    fd, path = tempfile.mkstemp(dir=upload_dir, suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)

        analyzer = make_analyzer()
        logger.info("Pipeline — analyze")
        result = await analyzer.analyze(path)

        logger.info("Pipeline — extract fields")
        extraction = extract_from_result(result)
        logger.info(
            "Extracted merchant=%r total=%s items=%d category=%s",
            extraction.merchant, extraction.total, len(extraction.items), extraction.category,
        )
        return extraction
    finally:
        if os.path.exists(path):
            os.remove(path)
