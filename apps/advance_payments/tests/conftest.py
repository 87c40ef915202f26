import pytest
from datetime import date
from decimal import Decimal

from apps.advance_payments.services import create_payment


@pytest.fixture
def reviewed_organization(organization_with_members):
    """Organization whose advance payments wait for an admin review."""
    organization_with_members.advance_payment_review_required = True
    organization_with_members.save()
    return organization_with_members


@pytest.fixture
def pending_payment(reviewed_organization, member_user):
    return create_payment(
        organization=reviewed_organization,
        user=member_user,
        amount=Decimal('200.00'),
        payment_date=date(2025, 3, 2),
        added_by=member_user,
    )
