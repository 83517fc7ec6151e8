from fintrack.models.transaction import TransactionModel  # noqa: F401
