import pytest
from datetime import timedelta

from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import AccountDeletionRequest, DeletionStatus


@pytest.fixture
def user(make_user):
    return make_user('testuser@example.com', 'Test User')


@pytest.fixture
def other_user(make_user):
    return make_user('other@example.com', 'Other User')


@pytest.fixture
def user_inactive(make_user):
    user = make_user('inactive@example.com', 'Inactive User')
    user.is_active = False
    user.save()
    return user


@pytest.fixture
def authenticated_client(user):
    """Return API client authenticated as ``user``."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def expired_request(user):
    """A pending request whose grace period ended yesterday."""
    now = timezone.now()
    return AccountDeletionRequest.objects.create(
        user=user,
        status=DeletionStatus.PENDING_DELETION,
        requested_at=now - timedelta(days=31),
        scheduled_deletion_at=now - timedelta(days=1),
    )
