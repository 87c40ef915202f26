import pytest
from datetime import date
from decimal import Decimal

from apps.expenses.services import ExpenseSplitService


@pytest.fixture
def march_groceries(organization_with_members, owner):
    """100.00 paid by the owner on 2025-03-05; admin and member owe 33.33 each."""
    expense, _ = ExpenseSplitService.create_expense(
        organization=organization_with_members,
        paid_by=owner,
        amount=Decimal('100.00'),
        expense_date=date(2025, 3, 5),
        description='Groceries',
        category='groceries',
    )
    return expense
