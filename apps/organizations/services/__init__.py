"""
Organizations app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    OrganizationsServiceError,
    OrganizationNotFoundError,
    InvalidInviteCodeError,
    InvalidRoleError,
    AlreadyMemberError,
    NotMemberError,
    OwnerCannotLeaveError,
    CannotChangeOwnerRoleError,
    CannotRemoveOwnerError,
    InsufficientPermissionsError,
)

from .organization_management import (
    create_organization,
    get_organization_by_id,
    get_member_organization,
    update_organization,
    delete_organization,
    regenerate_invite_code,
)

from .membership_management import (
    join_organization,
    leave_organization,
    remove_member,
    get_organization_members,
    get_split_eligible_members,
    is_split_eligible,
)

from .role_management import (
    update_member_role,
    ASSIGNABLE_ROLES,
)


__all__ = [
    # Exceptions
    'OrganizationsServiceError',
    'OrganizationNotFoundError',
    'InvalidInviteCodeError',
    'InvalidRoleError',
    'AlreadyMemberError',
    'NotMemberError',
    'OwnerCannotLeaveError',
    'CannotChangeOwnerRoleError',
    'CannotRemoveOwnerError',
    'InsufficientPermissionsError',

    # Organization management
    'create_organization',
    'get_organization_by_id',
    'get_member_organization',
    'update_organization',
    'delete_organization',
    'regenerate_invite_code',

    # Membership management
    'join_organization',
    'leave_organization',
    'remove_member',
    'get_organization_members',
    'get_split_eligible_members',
    'is_split_eligible',

    # Role management
    'update_member_role',
    'ASSIGNABLE_ROLES',
]
