"""
Domain error taxonomy shared by all ledger apps.

Services raise ``DomainError`` subclasses; each carries an ``ErrorKind``
that the HTTP layer maps to a status code. Views never build error
responses for these by hand - ``domain_exception_handler`` does it.

Exception Hierarchy:
    DomainError (base)
    ├── InvalidInputError        kind=validation    -> 400
    ├── PermissionDeniedError    kind=forbidden     -> 403
    ├── NotFoundError            kind=not_found     -> 404
    ├── StateConflictError       kind=conflict      -> 409
    ├── RecoveryExpiredError     kind=expired       -> 410
    └── LedgerInconsistentError  kind=inconsistent  -> 500
"""
import logging
from enum import Enum

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    VALIDATION = 'validation'
    FORBIDDEN = 'forbidden'
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    EXPIRED = 'expired'
    INCONSISTENT = 'inconsistent'


HTTP_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.EXPIRED: status.HTTP_410_GONE,
    ErrorKind.INCONSISTENT: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class DomainError(Exception):
    """
    Base exception for all ledger service errors.

    Extra keyword arguments are kept in ``details`` and returned to the
    client next to the message, e.g. the discrepancy of an inconsistent
    ledger or the date a recovery window closed.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message='', **details):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def http_status(self):
        return HTTP_STATUS_BY_KIND[self.kind]

    def to_dict(self):
        payload = {'error': self.message, 'kind': self.kind.value}
        payload.update({key: str(value) for key, value in self.details.items()})
        return payload


class InvalidInputError(DomainError):
    """Raised for bad input, e.g. a non-positive amount."""
    kind = ErrorKind.VALIDATION


class PermissionDeniedError(DomainError):
    """Raised when the acting user may not perform the operation."""
    kind = ErrorKind.FORBIDDEN


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""
    kind = ErrorKind.NOT_FOUND


class StateConflictError(DomainError):
    """Raised on an invalid state transition, e.g. a double deletion request."""
    kind = ErrorKind.CONFLICT


class RecoveryExpiredError(DomainError):
    """Raised when a grace window has already closed."""
    kind = ErrorKind.EXPIRED


class LedgerInconsistentError(DomainError):
    """Raised when ledger sums do not reconcile."""
    kind = ErrorKind.INCONSISTENT


def domain_exception_handler(exc, context):
    """
    DRF exception handler that understands ``DomainError``.

    Everything else falls through to DRF's default handler.
    """
    if isinstance(exc, DomainError):
        if exc.kind == ErrorKind.INCONSISTENT:
            logger.error("Ledger inconsistency: %s %s", exc.message, exc.details)
        return Response(exc.to_dict(), status=exc.http_status)

    return exception_handler(exc, context)
