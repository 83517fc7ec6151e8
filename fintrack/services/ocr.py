"""
Azure Document Intelligence client for receipt analysis.

The analyzer is built from explicit configuration. Missing credentials fail
at construction with ``ServiceUnavailableError``; there is no half-initialized
client to check on every call.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from azure.ai.formrecognizer.aio import DocumentAnalysisClient
from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import ClientAuthenticationError, ServiceRequestError

from fintrack.config import Settings
from fintrack.errors import ServiceUnavailableError
from fintrack.schemas import AnalyzedReceipt, AnalyzeResult, ReceiptField

logger = logging.getLogger(__name__)

RECEIPT_MODEL_ID = "prebuilt-receipt"

NOT_CONFIGURED_MESSAGE = (
    "Receipt analysis service is not configured. Please add Azure Document "
    "Intelligence credentials to your environment variables."
)


class Analyzer(Protocol):
    async def analyze(self, path: str) -> AnalyzeResult: ...


AnalyzerFactory = Callable[[], Analyzer]


def _convert_field(field: Any) -> ReceiptField:
    values: list[ReceiptField] = []
    properties: dict[str, ReceiptField] = {}
    if field.value_type == "list":
        values = [_convert_field(v) for v in field.value or []]
    elif field.value_type == "dictionary":
        properties = {k: _convert_field(v) for k, v in (field.value or {}).items()}
    return ReceiptField(
        content=field.content,
        confidence=field.confidence,
        values=values,
        properties=properties,
    )


def convert_result(result: Any) -> AnalyzeResult:
    """SDK ``AnalyzeResult`` -> our plain schema."""
    documents = [
        AnalyzedReceipt(
            doc_type=doc.doc_type or "receipt",
            fields={name: _convert_field(f) for name, f in (doc.fields or {}).items()},
        )
        for doc in (result.documents or [])
    ]
    return AnalyzeResult(documents=documents)


class ReceiptAnalyzer:
    """Runs the prebuilt receipt model on one file."""

    def __init__(self, endpoint: str, api_key: str):
        if not endpoint or not api_key:
            logger.warning(
                "Azure credentials check: endpoint=%s key=%s",
                "SET" if endpoint else "NOT SET",
                "SET" if api_key else "NOT SET",
            )
            raise ServiceUnavailableError(NOT_CONFIGURED_MESSAGE)
        try:
            self._client = DocumentAnalysisClient(endpoint, AzureKeyCredential(api_key))
        except ValueError as e:
            logger.error("Failed to initialize Azure client: %s", e)
            raise ServiceUnavailableError(NOT_CONFIGURED_MESSAGE) from e

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReceiptAnalyzer":
        return cls(
            settings.AZURE_DOC_INTELLIGENCE_ENDPOINT,
            settings.AZURE_DOC_INTELLIGENCE_KEY,
        )

    async def analyze(self, path: str) -> AnalyzeResult:
        logger.info("Submitting %s to %s", path, RECEIPT_MODEL_ID)
        try:
            async with self._client:
                with open(path, "rb") as fh:
                    poller = await self._client.begin_analyze_document(
                        RECEIPT_MODEL_ID, document=fh
                    )
                    result = await poller.result()
        except (ServiceRequestError, ClientAuthenticationError) as e:
            logger.error("Receipt analysis service unreachable: %s", e)
            raise ServiceUnavailableError(
                "Receipt analysis service is unreachable. Please try again later."
            ) from e
        converted = convert_result(result)
        logger.info("Analysis returned %d documents", len(converted.documents))
        return converted
