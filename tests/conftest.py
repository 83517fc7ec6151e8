"""
Shared pytest fixtures — in‑memory SQLite, FastAPI TestClient, bearer
tokens for two users and a fake receipt analyzer.
"""
import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="fintrack-data-"))
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="fintrack-uploads-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from fintrack.auth import create_access_token  # noqa: E402
from fintrack.config import settings  # noqa: E402
from fintrack.database import Base, get_db  # noqa: E402
from fintrack.models import TransactionModel  # noqa: E402,F401  — register model
from fintrack.main import app  # noqa: E402
from fintrack.routers.receipts import get_analyzer_factory  # noqa: E402
from fintrack.schemas import AnalyzedReceipt, AnalyzeResult, ReceiptField  # noqa: E402

USER_A = "user-a"
USER_B = "user-b"

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


class FakeAnalyzer:
    """Stands in for the OCR service; records every call."""

    def __init__(self):
        self.result = AnalyzeResult()
        self.error = None
        self.analyze_error = None
        self.built = 0
        self.calls = []

    def factory(self):
        self.built += 1
        if self.error is not None:
            raise self.error
        return self

    async def analyze(self, path):
        assert os.path.exists(path)
        self.calls.append(path)
        if self.analyze_error is not None:
            raise self.analyze_error
        return self.result


@pytest.fixture()
def analyzer():
    return FakeAnalyzer()


@pytest.fixture()
def client(db, analyzer):
    def _override():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _override
    app.dependency_overrides[get_analyzer_factory] = lambda: analyzer.factory
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def lenient_client(client):
    """Same overrides as ``client``, but unhandled errors come back as 500s."""
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture()
def auth_a():
    return {"Authorization": f"Bearer {create_access_token(USER_A)}"}


@pytest.fixture()
def auth_b():
    return {"Authorization": f"Bearer {create_access_token(USER_B)}"}


@pytest.fixture()
def upload_dir():
    return settings.UPLOAD_DIR


def field(content=None, confidence=None, **properties):
    return ReceiptField(content=content, confidence=confidence, properties=properties)


def receipt_document(merchant="Cafe Coffee Day", total="$45.60", date="2025-03-14",
                     items=(("Cappuccino", "3.50"),), **extra):
    fields = {}
    if merchant is not None:
        fields["MerchantName"] = field(merchant, 0.92)
    if total is not None:
        fields["Total"] = field(total, 0.88)
    if date is not None:
        fields["TransactionDate"] = field(date, 0.75)
    if items is not None:
        fields["Items"] = ReceiptField(values=[
            field(Description=field(name), Price=field(price)) for name, price in items
        ])
    fields.update(extra)
    return AnalyzedReceipt(fields=fields)
