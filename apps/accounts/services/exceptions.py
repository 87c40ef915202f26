"""Domain-specific exceptions for accounts services."""

from apps.common.exceptions import (
    DomainError,
    InvalidInputError,
    StateConflictError,
    RecoveryExpiredError,
)


class AccountsServiceError(DomainError):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError, InvalidInputError):
    """Raised when user registration fails."""
    pass


class InvalidCredentialsError(AccountsServiceError, InvalidInputError):
    """Raised when authentication credentials are invalid."""
    pass


class DeletionAlreadyRequestedError(AccountsServiceError, StateConflictError):
    """Raised when the account is already scheduled for deletion."""
    pass


class NoPendingDeletionError(AccountsServiceError, StateConflictError):
    """Raised when recovering an account that is not scheduled for deletion."""
    pass


class RecoveryWindowExpiredError(AccountsServiceError, RecoveryExpiredError):
    """Raised when the deletion grace period is over."""
    pass
