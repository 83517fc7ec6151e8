"""
SQLAlchemy model for transaction persistence.
"""
from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, JSON, String, Text

from fintrack.database import Base


class TransactionModel(Base):
    """A single income or expense entry owned by one user"""
    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)  # income | expense
    amount = Column(BigInteger, nullable=False)  # whole currency units, > 0
    currency = Column(String, nullable=False, default="INR")
    category = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(DateTime, nullable=False, index=True)

    # hasReceipt, merchant, transactionDate, items, confidence
    receipt_metadata = Column(JSON, nullable=False, default=lambda: {"hasReceipt": False})

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
