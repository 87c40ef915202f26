"""Fixtures shared by every app's test suite."""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User
from apps.organizations.models import Organization, OrganizationMembership, OrganizationRole


def authenticate(client, user):
    """Attach a Bearer token for ``user`` to ``client``."""
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def make_user(db):
    def _make_user(email, name='', password='TestPass123!'):
        return User.objects.create_user(email=email, password=password, name=name)
    return _make_user


@pytest.fixture
def owner(make_user):
    return make_user('owner@example.com', 'Olivia Owner')


@pytest.fixture
def admin_user(make_user):
    return make_user('admin@example.com', 'Adam Admin')


@pytest.fixture
def member_user(make_user):
    return make_user('member@example.com', 'Mia Member')


@pytest.fixture
def cook_user(make_user):
    return make_user('cook@example.com', 'Carl Cook')


@pytest.fixture
def outsider(make_user):
    """A user who belongs to no organization."""
    return make_user('outsider@example.com', 'Otto Outsider')


@pytest.fixture
def organization(db, owner):
    """Organization with only its owner."""
    organization = Organization.objects.create(name='Flat 12B', owner=owner, currency='AED')
    OrganizationMembership.objects.create(
        user=owner,
        organization=organization,
        role=OrganizationRole.OWNER,
    )
    return organization


@pytest.fixture
def organization_with_members(organization, admin_user, member_user, cook_user):
    """Organization with owner, admin, member and cook."""
    for user, role in [
        (admin_user, OrganizationRole.ADMIN),
        (member_user, OrganizationRole.MEMBER),
        (cook_user, OrganizationRole.COOK),
    ]:
        OrganizationMembership.objects.create(user=user, organization=organization, role=role)
    return organization


@pytest.fixture
def owner_client(owner):
    return authenticate(APIClient(), owner)


@pytest.fixture
def admin_client(admin_user):
    return authenticate(APIClient(), admin_user)


@pytest.fixture
def member_client(member_user):
    return authenticate(APIClient(), member_user)


@pytest.fixture
def cook_client(cook_user):
    return authenticate(APIClient(), cook_user)


@pytest.fixture
def outsider_client(outsider):
    return authenticate(APIClient(), outsider)
