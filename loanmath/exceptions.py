"""
Custom exceptions for the loan math engine.
"""

from typing import Any, Dict, Optional


class LoanMathError(Exception):
    """Base exception for all loanmath errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class InvalidInputError(LoanMathError, ValueError):
    """Raised when a calculation precondition is violated."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid {field}: {reason}",
            {"field": field, "value": value},
        )
        self.field = field
        self.value = value


class InvalidTermError(InvalidInputError):
    """Raised when a loan term is not a positive whole number of periods."""

    def __init__(self, value: Any, field: str = "periods"):
        super().__init__(field, value, "must be a positive whole number of periods")
