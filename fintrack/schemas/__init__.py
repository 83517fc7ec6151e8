from fintrack.schemas.base import CamelModel, MessageResponse, RequestModel  # noqa: F401
from fintrack.schemas.receipt import (  # noqa: F401
    AnalyzedReceipt,
    AnalyzeResult,
    Confidence,
    RawReceiptExtraction,
    ReceiptField,
    ReceiptItem,
    ReceiptMetadata,
    ReceiptMetadataIn,
    ReceiptUploadResponse,
)
from fintrack.schemas.report import (  # noqa: F401
    CategoryTotal,
    DashboardSummary,
    DailyTotals,
    MonthlyReport,
    MonthlyTotals,
    SummaryStats,
)
from fintrack.schemas.transaction import (  # noqa: F401
    ReceiptTransactionResponse,
    Transaction,
    TransactionCreate,
    TransactionType,
    TransactionUpdate,
)
