"""
fintrack backend — FastAPI application entry‑point.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fintrack import __version__
from fintrack.config import settings
from fintrack.database import Base, engine
from fintrack.errors import FinanceTrackerError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s  %(name)-30s  %(levelname)-5s  %(message)s",
)
logger = logging.getLogger(__name__)

RECEIPTS_PREFIX = "/api/receipts"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure data dirs + tables exist
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    # Import models so Base.metadata knows about them
    import fintrack.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready (%s)", settings.DATABASE_URL)
    logger.info(
        "AZURE_DOC_INTELLIGENCE_ENDPOINT: %s, AZURE_DOC_INTELLIGENCE_KEY: %s",
        "SET" if settings.AZURE_DOC_INTELLIGENCE_ENDPOINT else "NOT SET",
        "SET" if settings.AZURE_DOC_INTELLIGENCE_KEY else "NOT SET",
    )
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="fintrack",
    description="Personal finance tracker: transactions, receipt scanning, reports",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ── Error envelope ───────────────────────────────────────────────────────
def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    """Receipt routes answer ``{success, message}``; the rest ``{message}``."""
    body = {"message": message}
    if request.url.path.startswith(RECEIPTS_PREFIX):
        body = {"success": False, "message": message}
    return JSONResponse(status_code=status_code, content=body)


def _join_names(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return ", ".join(names[:-1]) + f", and {names[-1]}"


def format_validation_errors(errors: list[dict]) -> str:
    missing = [str(e["loc"][-1]) for e in errors if e.get("type") == "missing"]
    if missing:
        return f"Please provide {_join_names(missing)}"
    first = errors[0]
    ctx_error = (first.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    return f"{first['loc'][-1]}: {first['msg']}"


@app.exception_handler(FinanceTrackerError)
async def finance_error_handler(request: Request, exc: FinanceTrackerError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(request, exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = format_validation_errors(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return error_response(request, 400, message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = "Server Error"
    if request.url.path.startswith(RECEIPTS_PREFIX):
        message = "Failed to analyze receipt. Please try again."
    return error_response(request, 500, message)


@app.get("/")
async def root():
    return {"service": "fintrack", "version": __version__, "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# ── Register API routers ─────────────────────────────────────────────────
from fintrack.routers.transactions import router as transactions_router  # noqa: E402
from fintrack.routers.receipts import router as receipts_router  # noqa: E402
from fintrack.routers.reports import router as reports_router  # noqa: E402

app.include_router(transactions_router, prefix="/api", tags=["Transactions"])
app.include_router(receipts_router, prefix="/api", tags=["Receipts"])
app.include_router(reports_router, prefix="/api", tags=["Reports"])
