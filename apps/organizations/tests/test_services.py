"""
Service layer tests for the organizations app.

Tests cover:
- Organization lifecycle and invite codes
- Membership rules (owner cannot leave, cannot be removed)
- Role updates, including the cook role
- Split eligibility
"""

import pytest
from uuid import uuid4
from unittest.mock import patch

from apps.accounts.services import request_deletion
from apps.organizations.models import Organization, OrganizationMembership, OrganizationRole
from apps.organizations.services import (
    create_organization,
    get_organization_by_id,
    get_member_organization,
    update_organization,
    delete_organization,
    regenerate_invite_code,
    join_organization,
    leave_organization,
    remove_member,
    get_organization_members,
    get_split_eligible_members,
    update_member_role,
)
from apps.organizations.services.exceptions import (
    OrganizationNotFoundError,
    InvalidInviteCodeError,
    InvalidRoleError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
    OwnerCannotLeaveError,
    CannotChangeOwnerRoleError,
    CannotRemoveOwnerError,
)


@pytest.mark.django_db
class TestOrganizationManagement:

    def test_create_organization_adds_owner_membership(self, owner):
        organization = create_organization(name='Flat 3', owner=owner, description='Top floor')

        assert organization.owner == owner
        assert organization.currency == 'AED'
        assert len(organization.invite_code) == 16
        membership = OrganizationMembership.objects.get(organization=organization, user=owner)
        assert membership.role == OrganizationRole.OWNER

    def test_create_organization_with_currency_and_review_policy(self, owner):
        organization = create_organization(
            name='Flat 4',
            owner=owner,
            currency='EUR',
            advance_payment_review_required=True,
        )

        assert organization.currency == 'EUR'
        assert organization.advance_payment_review_required is True

    @pytest.mark.django_db(transaction=True)
    def test_create_organization_gives_up_after_invite_code_collisions(self, owner):
        with patch(
            'apps.organizations.services.organization_management.generate_invite_code',
            return_value='samecode12345678',
        ):
            create_organization(name='First', owner=owner)

            with pytest.raises(RuntimeError, match="Failed to generate unique invite code"):
                create_organization(name='Second', owner=owner)

        assert Organization.objects.count() == 1

    def test_get_organization_by_id_not_found(self):
        with pytest.raises(OrganizationNotFoundError):
            get_organization_by_id(organization_id=uuid4())

    def test_get_member_organization_rejects_non_member(self, organization, outsider):
        with pytest.raises(NotMemberError):
            get_member_organization(organization_id=organization.id, user=outsider)

    def test_get_member_organization_returns_organization(self, organization, owner):
        assert get_member_organization(organization_id=organization.id, user=owner) == organization

    def test_update_organization_as_admin(self, organization_with_members, admin_user):
        updated = update_organization(
            organization_id=organization_with_members.id,
            user=admin_user,
            name='Renamed Flat',
            advance_payment_review_required=True,
        )

        assert updated.name == 'Renamed Flat'
        assert updated.advance_payment_review_required is True

    def test_update_organization_as_member_forbidden(self, organization_with_members, member_user):
        with pytest.raises(InsufficientPermissionsError):
            update_organization(
                organization_id=organization_with_members.id,
                user=member_user,
                name='Nope',
            )

    def test_delete_organization_owner_only(self, organization_with_members, admin_user, owner):
        with pytest.raises(InsufficientPermissionsError):
            delete_organization(organization_id=organization_with_members.id, user=admin_user)

        delete_organization(organization_id=organization_with_members.id, user=owner)
        assert not Organization.objects.filter(id=organization_with_members.id).exists()

    def test_regenerate_invite_code(self, organization, owner):
        old_code = organization.invite_code

        new_code = regenerate_invite_code(organization_id=organization.id, user=owner)

        organization.refresh_from_db()
        assert new_code != old_code
        assert organization.invite_code == new_code

    def test_regenerate_invite_code_requires_admin(self, organization_with_members, member_user):
        with pytest.raises(InsufficientPermissionsError):
            regenerate_invite_code(organization_id=organization_with_members.id, user=member_user)


@pytest.mark.django_db
class TestMembershipManagement:

    def test_join_with_invite_code(self, organization, outsider):
        membership = join_organization(invite_code=organization.invite_code, user=outsider)

        assert membership.role == OrganizationRole.MEMBER
        assert organization.has_member(outsider)

    def test_join_with_wrong_code(self, organization, outsider):
        with pytest.raises(InvalidInviteCodeError):
            join_organization(invite_code='not-a-real-code', user=outsider)

    def test_join_twice(self, organization, owner):
        with pytest.raises(AlreadyMemberError):
            join_organization(invite_code=organization.invite_code, user=owner)

    def test_owner_cannot_leave(self, organization, owner):
        with pytest.raises(OwnerCannotLeaveError):
            leave_organization(organization_id=organization.id, user=owner)

    def test_member_leaves(self, organization_with_members, member_user):
        leave_organization(organization_id=organization_with_members.id, user=member_user)

        assert not organization_with_members.has_member(member_user)

    def test_non_member_cannot_leave(self, organization, outsider):
        with pytest.raises(NotMemberError):
            leave_organization(organization_id=organization.id, user=outsider)

    def test_admin_removes_member(self, organization_with_members, admin_user, member_user):
        remove_member(
            organization_id=organization_with_members.id,
            user_id=member_user.id,
            removed_by=admin_user,
        )

        assert not organization_with_members.has_member(member_user)

    def test_cannot_remove_owner(self, organization_with_members, admin_user, owner):
        with pytest.raises(CannotRemoveOwnerError):
            remove_member(
                organization_id=organization_with_members.id,
                user_id=owner.id,
                removed_by=admin_user,
            )

    def test_member_cannot_remove_others(self, organization_with_members, member_user, cook_user):
        with pytest.raises(InsufficientPermissionsError):
            remove_member(
                organization_id=organization_with_members.id,
                user_id=cook_user.id,
                removed_by=member_user,
            )

    def test_get_members(self, organization_with_members):
        memberships = get_organization_members(organization_id=organization_with_members.id)

        assert memberships.count() == 4

    def test_split_eligible_members_exclude_cooks(
        self, organization_with_members, owner, admin_user, member_user, cook_user
    ):
        eligible = get_split_eligible_members(organization=organization_with_members)

        assert owner in eligible
        assert admin_user in eligible
        assert member_user in eligible
        assert cook_user not in eligible

    def test_split_eligible_members_exclude_pending_deletion(
        self, organization_with_members, member_user
    ):
        request_deletion(user=member_user)

        eligible = get_split_eligible_members(organization=organization_with_members)

        assert member_user not in eligible
        assert len(eligible) == 2


@pytest.mark.django_db
class TestRoleManagement:

    def test_promote_member_to_cook(self, organization_with_members, owner, member_user):
        membership = update_member_role(
            organization_id=organization_with_members.id,
            user_id=member_user.id,
            new_role=OrganizationRole.COOK,
            updated_by=owner,
        )

        assert membership.role == OrganizationRole.COOK

    def test_owner_role_is_immutable(self, organization_with_members, admin_user, owner):
        with pytest.raises(CannotChangeOwnerRoleError):
            update_member_role(
                organization_id=organization_with_members.id,
                user_id=owner.id,
                new_role=OrganizationRole.MEMBER,
                updated_by=admin_user,
            )

    def test_cannot_assign_owner_role(self, organization_with_members, owner, member_user):
        with pytest.raises(InvalidRoleError):
            update_member_role(
                organization_id=organization_with_members.id,
                user_id=member_user.id,
                new_role=OrganizationRole.OWNER,
                updated_by=owner,
            )

    def test_role_update_requires_admin(self, organization_with_members, member_user, cook_user):
        with pytest.raises(InsufficientPermissionsError):
            update_member_role(
                organization_id=organization_with_members.id,
                user_id=cook_user.id,
                new_role=OrganizationRole.MEMBER,
                updated_by=member_user,
            )

    def test_role_update_for_non_member(self, organization, owner, outsider):
        with pytest.raises(NotMemberError):
            update_member_role(
                organization_id=organization.id,
                user_id=outsider.id,
                new_role=OrganizationRole.ADMIN,
                updated_by=owner,
            )
