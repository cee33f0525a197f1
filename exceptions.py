"""
Domain errors raised by the loan service.

Each error carries the HTTP status and the envelope fields it maps to; the
handlers registered in ``main.py`` render them as ``{success, message, data, errors}``.
"""
from typing import Optional


class LoanServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class LoanValidationError(LoanServiceError):
    """Input failed a business rule that the request schema cannot express."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message, errors if errors is not None else [message])


class LoanNotFoundError(LoanServiceError):
    status_code = 404

    @classmethod
    def for_id(cls, loan_id: int) -> "LoanNotFoundError":
        return cls(f"Loan with ID {loan_id} not found")

    @classmethod
    def for_number(cls, loan_number: str) -> "LoanNotFoundError":
        return cls(f"Loan with number {loan_number} not found")


class LoanPersistenceError(LoanServiceError):
    """The store rejected or failed a write; ``errors`` holds the driver message."""

    status_code = 500

    def __init__(self, message: str, cause: Exception):
        super().__init__(message, [str(cause)])
        self.cause = cause
