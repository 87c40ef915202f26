"""
Domain-specific exceptions for the organizations app.

Each exception carries an ErrorKind through its common base, so the API
exception handler maps it to the right HTTP status.
"""

from apps.common.exceptions import (
    DomainError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    StateConflictError,
)


class OrganizationsServiceError(DomainError):
    """Base exception for all organizations service errors."""
    pass


class OrganizationNotFoundError(OrganizationsServiceError, NotFoundError):
    """Raised when an organization does not exist or is inaccessible."""
    pass


class InvalidInviteCodeError(OrganizationsServiceError, InvalidInputError):
    """Raised when an invite code is incorrect."""
    pass


class InvalidRoleError(OrganizationsServiceError, InvalidInputError):
    """Raised when a role cannot be assigned."""
    pass


class AlreadyMemberError(OrganizationsServiceError, StateConflictError):
    """Raised when a user tries to join an organization they're already in."""
    pass


class NotMemberError(OrganizationsServiceError, PermissionDeniedError):
    """Raised when a user tries to perform an action requiring membership."""
    pass


class OwnerCannotLeaveError(OrganizationsServiceError, StateConflictError):
    """Raised when the owner tries to leave their organization."""
    pass


class CannotChangeOwnerRoleError(OrganizationsServiceError, StateConflictError):
    """Raised when attempting to change the owner's role."""
    pass


class CannotRemoveOwnerError(OrganizationsServiceError, StateConflictError):
    """Raised when attempting to remove the owner."""
    pass


class InsufficientPermissionsError(OrganizationsServiceError, PermissionDeniedError):
    """Raised when a user lacks required permissions for an action."""
    pass
