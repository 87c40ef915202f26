"""Domain exceptions for advance payments."""
from apps.common.exceptions import (
    InvalidInputError,
    PermissionDeniedError,
    StateConflictError,
)


class InvalidAdvancePaymentError(InvalidInputError):
    pass


class AdvancePaymentPermissionError(PermissionDeniedError):
    pass


class AdvancePaymentAlreadyReviewedError(StateConflictError):
    """Raised when reviewing a payment that is no longer pending."""
    pass
