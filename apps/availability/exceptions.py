"""Domain exceptions for the availability app."""
from apps.common.exceptions import (
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    StateConflictError,
)


class InvalidAvailabilityPeriodError(InvalidInputError):
    """Raised when an absence has bad dates or is too short to count."""
    pass


class AvailabilityNotFoundError(NotFoundError):
    pass


class AvailabilityPermissionError(PermissionDeniedError):
    """Raised when a user manages someone else's absence without admin rights."""
    pass


class AvailabilityAlreadyCancelledError(StateConflictError):
    pass
