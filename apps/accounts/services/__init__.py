"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    DeletionAlreadyRequestedError,
    NoPendingDeletionError,
    RecoveryWindowExpiredError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .account_deletion import (
    request_deletion,
    recover_account,
    cancel_deletion,
    get_deletion_status,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'DeletionAlreadyRequestedError',
    'NoPendingDeletionError',
    'RecoveryWindowExpiredError',
    # Services
    'register_user',
    'authenticate_user',
    'request_deletion',
    'recover_account',
    'cancel_deletion',
    'get_deletion_status',
]
