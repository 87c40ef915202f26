"""
Membership management service.

Handles organization membership operations with concurrency protection.
"""

import logging
from typing import List
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User, DeletionStatus
from apps.organizations.models import (
    Organization,
    OrganizationMembership,
    OrganizationRole,
    SPLIT_ELIGIBLE_ROLES,
)

from .exceptions import (
    OrganizationNotFoundError,
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
    OwnerCannotLeaveError,
    CannotRemoveOwnerError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def join_organization(*, invite_code: str, user: User) -> OrganizationMembership:
    """
    Join an organization using its invite code.

    The organization row is locked so concurrent joins serialize on it.

    Raises:
        InvalidInviteCodeError: If no organization has this invite code
        AlreadyMemberError: If user is already a member
    """
    try:
        organization = (
            Organization.objects
            .select_for_update()
            .get(invite_code=invite_code)
        )
    except Organization.DoesNotExist:
        raise InvalidInviteCodeError("Invalid invite code")

    if organization.has_member(user):
        raise AlreadyMemberError(f"User is already a member of {organization.name}")

    try:
        # Savepoint so the outer transaction survives a duplicate
        with transaction.atomic():
            membership = OrganizationMembership.objects.create(
                user=user,
                organization=organization,
                role=OrganizationRole.MEMBER
            )
    except IntegrityError:
        raise AlreadyMemberError(f"User is already a member of {organization.name}")

    logger.info("User %s joined organization %s", user.id, organization.id)
    return membership


@transaction.atomic
def leave_organization(*, organization_id: UUID, user: User) -> None:
    """
    Leave an organization.

    Owner cannot leave their own organization; they must delete it instead.

    Raises:
        OrganizationNotFoundError: If organization doesn't exist
        NotMemberError: If user is not a member
        OwnerCannotLeaveError: If user is the owner
    """
    try:
        organization = Organization.objects.get(id=organization_id)
    except Organization.DoesNotExist:
        raise OrganizationNotFoundError(f"Organization with ID {organization_id} not found")

    if organization.owner_id == user.id:
        raise OwnerCannotLeaveError(
            "Organization owner cannot leave. Delete the organization instead."
        )

    try:
        membership = (
            OrganizationMembership.objects
            .select_for_update()
            .get(user=user, organization=organization)
        )
    except OrganizationMembership.DoesNotExist:
        raise NotMemberError(f"User is not a member of {organization.name}")

    membership.delete()
    logger.info("User %s left organization %s", user.id, organization.id)


@transaction.atomic
def remove_member(
    *,
    organization_id: UUID,
    user_id: UUID,
    removed_by: User
) -> None:
    """
    Remove a member from an organization (admin only).

    Raises:
        OrganizationNotFoundError: If organization doesn't exist
        InsufficientPermissionsError: If removed_by is not admin
        CannotRemoveOwnerError: If trying to remove the owner
        NotMemberError: If target user is not a member
    """
    try:
        organization = Organization.objects.get(id=organization_id)
    except Organization.DoesNotExist:
        raise OrganizationNotFoundError(f"Organization with ID {organization_id} not found")

    if not organization.is_admin(removed_by):
        raise InsufficientPermissionsError("Only organization admins can remove members")

    if str(organization.owner_id) == str(user_id):
        raise CannotRemoveOwnerError("Cannot remove the organization owner")

    try:
        membership = (
            OrganizationMembership.objects
            .select_for_update()
            .get(organization=organization, user_id=user_id)
        )
    except OrganizationMembership.DoesNotExist:
        raise NotMemberError("User is not a member of this organization")

    membership.delete()
    logger.info("User %s removed from organization %s by %s", user_id, organization.id, removed_by.id)


def get_organization_members(*, organization_id: UUID) -> QuerySet[OrganizationMembership]:
    """
    Get all memberships of an organization, owner and admins first.

    Raises:
        OrganizationNotFoundError: If organization doesn't exist
    """
    if not Organization.objects.filter(id=organization_id).exists():
        raise OrganizationNotFoundError(f"Organization with ID {organization_id} not found")

    return (
        OrganizationMembership.objects
        .filter(organization_id=organization_id)
        .select_related('user')
        .order_by('-role', 'joined_at')
    )


def get_split_eligible_members(*, organization: Organization) -> List[User]:
    """
    Members who share the organization's expenses.

    Cooks never share expenses, and neither do users with a pending
    deletion request. Ordered by join date so split lines are stable.
    """
    memberships = (
        OrganizationMembership.objects
        .filter(organization=organization, role__in=SPLIT_ELIGIBLE_ROLES)
        .exclude(user__deletion_requests__status=DeletionStatus.PENDING_DELETION)
        .select_related('user')
        .order_by('joined_at')
    )
    return [membership.user for membership in memberships]


def is_split_eligible(*, organization: Organization, user: User) -> bool:
    return any(member.id == user.id for member in get_split_eligible_members(organization=organization))
