"""
Organization management service.

Handles organization CRUD operations with proper transaction safety.
"""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import Prefetch

from apps.accounts.models import User
from apps.organizations.models import (
    Organization,
    OrganizationMembership,
    OrganizationRole,
    generate_invite_code,
)

from .exceptions import (
    OrganizationNotFoundError,
    InsufficientPermissionsError,
    NotMemberError,
)

logger = logging.getLogger(__name__)


def create_organization(
    *,
    name: str,
    owner: User,
    description: str = '',
    currency: Optional[str] = None,
    advance_payment_review_required: bool = False,
    max_retries: int = 5
) -> Organization:
    """
    Create a new organization and add the creator as owner.

    Args:
        name: Organization name
        owner: User who will own the organization
        description: Optional description
        currency: ISO currency code for the ledger (defaults to DEFAULT_CURRENCY)
        advance_payment_review_required: Whether advance payments need approval
        max_retries: Maximum attempts to generate unique invite code

    Returns:
        Created Organization instance

    Raises:
        RuntimeError: If cannot generate unique invite code after retries
    """
    extra = {'currency': currency} if currency else {}

    for attempt in range(max_retries):
        invite_code = generate_invite_code()

        try:
            # Each attempt is a separate transaction
            with transaction.atomic():
                organization = Organization.objects.create(
                    name=name,
                    owner=owner,
                    description=description,
                    invite_code=invite_code,
                    advance_payment_review_required=advance_payment_review_required,
                    **extra
                )

                OrganizationMembership.objects.create(
                    user=owner,
                    organization=organization,
                    role=OrganizationRole.OWNER
                )

                logger.info("Created organization %s owned by %s", organization.id, owner.id)
                return organization

        except IntegrityError:
            # Invite code collision (very rare)
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique invite code after {max_retries} attempts"
                )
            continue

    raise RuntimeError("Unexpected error in organization creation")


def get_organization_by_id(*, organization_id: UUID) -> Organization:
    """
    Get an organization by ID with its memberships prefetched.

    Raises:
        OrganizationNotFoundError: If organization doesn't exist
    """
    try:
        return (
            Organization.objects
            .select_related('owner')
            .prefetch_related(
                Prefetch(
                    'memberships',
                    queryset=OrganizationMembership.objects.select_related('user')
                )
            )
            .get(id=organization_id)
        )
    except Organization.DoesNotExist:
        raise OrganizationNotFoundError(f"Organization with ID {organization_id} not found")


def get_member_organization(*, organization_id: UUID, user: User) -> Organization:
    """
    Resolve an organization the user belongs to.

    Every ledger operation starts here: it turns a request's organization id
    plus the authenticated user into the tenant the call is scoped to.

    Raises:
        OrganizationNotFoundError: If organization doesn't exist
        NotMemberError: If user is not a member
    """
    try:
        organization = Organization.objects.select_related('owner').get(id=organization_id)
    except (Organization.DoesNotExist, ValidationError):
        raise OrganizationNotFoundError(f"Organization with ID {organization_id} not found")

    if not organization.has_member(user):
        raise NotMemberError("You must be a member of this organization")

    return organization


@transaction.atomic
def update_organization(
    *,
    organization_id: UUID,
    user: User,
    name: Optional[str] = None,
    description: Optional[str] = None,
    currency: Optional[str] = None,
    advance_payment_review_required: Optional[bool] = None
) -> Organization:
    """
    Update organization details (admin only).

    Raises:
        OrganizationNotFoundError: If organization doesn't exist
        InsufficientPermissionsError: If user is not admin
    """
    try:
        organization = (
            Organization.objects
            .select_for_update()
            .get(id=organization_id)
        )
    except Organization.DoesNotExist:
        raise OrganizationNotFoundError(f"Organization with ID {organization_id} not found")

    if not organization.is_admin(user):
        raise InsufficientPermissionsError("Only organization admins can update the organization")

    update_fields = ['updated_at']

    if name is not None:
        organization.name = name
        update_fields.append('name')

    if description is not None:
        organization.description = description
        update_fields.append('description')

    if currency is not None:
        organization.currency = currency
        update_fields.append('currency')

    if advance_payment_review_required is not None:
        organization.advance_payment_review_required = advance_payment_review_required
        update_fields.append('advance_payment_review_required')

    organization.save(update_fields=update_fields)

    return organization


@transaction.atomic
def delete_organization(*, organization_id: UUID, user: User) -> None:
    """
    Delete an organization (owner only).

    Cascading deletes remove memberships and every ledger entry.

    Raises:
        OrganizationNotFoundError: If organization doesn't exist
        InsufficientPermissionsError: If user is not the owner
    """
    try:
        organization = (
            Organization.objects
            .select_for_update()
            .get(id=organization_id)
        )
    except Organization.DoesNotExist:
        raise OrganizationNotFoundError(f"Organization with ID {organization_id} not found")

    if organization.owner != user:
        raise InsufficientPermissionsError("Only the owner can delete the organization")

    logger.info("Deleting organization %s", organization.id)
    organization.delete()


@transaction.atomic
def regenerate_invite_code(
    *,
    organization_id: UUID,
    user: User,
    max_retries: int = 5
) -> str:
    """
    Regenerate an organization's invite code (admin only).

    Raises:
        OrganizationNotFoundError: If organization doesn't exist
        InsufficientPermissionsError: If user is not admin
        RuntimeError: If cannot generate unique code after retries
    """
    try:
        organization = (
            Organization.objects
            .select_for_update()
            .get(id=organization_id)
        )
    except Organization.DoesNotExist:
        raise OrganizationNotFoundError(f"Organization with ID {organization_id} not found")

    if not organization.is_admin(user):
        raise InsufficientPermissionsError("Only organization admins can regenerate invite codes")

    for attempt in range(max_retries):
        new_code = generate_invite_code()
        if Organization.objects.filter(invite_code=new_code).exists():
            continue

        organization.invite_code = new_code
        organization.save(update_fields=['invite_code', 'updated_at'])
        return new_code

    raise RuntimeError(
        f"Failed to generate unique invite code after {max_retries} attempts"
    )
