"""Domain exceptions mapped to HTTP responses in ``fintrack.main``."""


class FinanceTrackerError(Exception):
    """Base exception for finance tracker errors"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FinanceTrackerError):
    """Missing fields, non-positive amounts, rejected uploads"""
    status_code = 400


class AuthenticationError(FinanceTrackerError):
    """Missing or invalid bearer credential"""
    status_code = 401


class NotFoundError(FinanceTrackerError):
    """Record does not exist for the acting user"""
    status_code = 404


class ServiceUnavailableError(FinanceTrackerError):
    """Receipt analysis service not configured or unreachable"""
    status_code = 503


class ExtractionEmptyError(FinanceTrackerError):
    """Receipt analysis ran but returned no usable document"""
    status_code = 400
