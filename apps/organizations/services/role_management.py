"""
Role management service.

Handles member role updates with concurrency protection.
"""

import logging
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.organizations.models import Organization, OrganizationMembership, OrganizationRole

from .exceptions import (
    OrganizationNotFoundError,
    NotMemberError,
    CannotChangeOwnerRoleError,
    InsufficientPermissionsError,
    InvalidRoleError,
)

logger = logging.getLogger(__name__)

ASSIGNABLE_ROLES = [OrganizationRole.ADMIN, OrganizationRole.MEMBER, OrganizationRole.COOK]


@transaction.atomic
def update_member_role(
    *,
    organization_id: UUID,
    user_id: UUID,
    new_role: str,
    updated_by: User
) -> OrganizationMembership:
    """
    Update a member's role (admin only).

    Uses select_for_update to prevent concurrent role changes.
    The owner's role cannot be changed and no one can be promoted to owner.

    Args:
        organization_id: UUID of the organization
        user_id: UUID of the user whose role to update
        new_role: 'admin', 'member' or 'cook'
        updated_by: User performing the update (must be admin)

    Raises:
        InvalidRoleError: If new_role is not assignable
        OrganizationNotFoundError: If organization doesn't exist
        InsufficientPermissionsError: If updated_by is not admin
        NotMemberError: If target user is not a member
        CannotChangeOwnerRoleError: If trying to change owner's role
    """
    if new_role not in ASSIGNABLE_ROLES:
        raise InvalidRoleError(
            f"Invalid role. Must be one of: {[str(role) for role in ASSIGNABLE_ROLES]}"
        )

    try:
        organization = Organization.objects.get(id=organization_id)
    except Organization.DoesNotExist:
        raise OrganizationNotFoundError(f"Organization with ID {organization_id} not found")

    if not organization.is_admin(updated_by):
        raise InsufficientPermissionsError("Only organization admins can update member roles")

    try:
        membership = (
            OrganizationMembership.objects
            .select_for_update()
            .get(organization=organization, user_id=user_id)
        )
    except OrganizationMembership.DoesNotExist:
        raise NotMemberError("User is not a member of this organization")

    if membership.role == OrganizationRole.OWNER:
        raise CannotChangeOwnerRoleError("Cannot change the owner's role")

    membership.role = new_role
    membership.save(update_fields=['role'])

    logger.info(
        "Role of user %s in organization %s set to %s by %s",
        user_id, organization.id, new_role, updated_by.id
    )
    return membership
