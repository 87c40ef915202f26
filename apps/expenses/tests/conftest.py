import pytest
from datetime import date
from decimal import Decimal

from apps.availability.models import AvailabilityRecord
from apps.expenses.services import ExpenseSplitService


EXPENSE_DATE = date(2025, 3, 5)


@pytest.fixture
def away(db):
    """Record an absence covering EXPENSE_DATE for a user."""
    def _away(user):
        return AvailabilityRecord.objects.create(
            user=user,
            start_date=date(2025, 3, 1),
            end_date=date(2025, 3, 10),
            reason='Travelling',
            created_by=user,
        )
    return _away


@pytest.fixture
def grocery_expense(organization_with_members, owner):
    """100.00 paid by the owner, split among owner, admin and member."""
    expense, _ = ExpenseSplitService.create_expense(
        organization=organization_with_members,
        paid_by=owner,
        amount=Decimal('100.00'),
        expense_date=EXPENSE_DATE,
        description='Weekly groceries',
        category='groceries',
    )
    return expense
