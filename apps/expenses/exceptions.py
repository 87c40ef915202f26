"""
Domain exceptions for the expenses app.

Each subclasses the shared taxonomy in apps.common.exceptions so the API
exception handler picks the HTTP status.
"""
from apps.common.exceptions import (
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)


class InvalidExpenseError(InvalidInputError):
    """Raised for a non-positive amount or a payer who cannot share expenses."""
    pass


class ExpenseNotFoundError(NotFoundError):
    pass


class ExpenseSplitNotFoundError(NotFoundError):
    """Raised when the expense has no line for the given user."""
    pass


class ExpensePermissionError(PermissionDeniedError):
    pass
