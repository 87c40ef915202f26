"""
Service tests for expense splitting.

Tests cover:
- Equal split with the rounding remainder on the payer's line
- Availability, cook and pending-deletion exclusions
- Idempotent mark-paid and status transitions
- Stats, update and delete rules
"""

import pytest
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

from apps.accounts.services import request_deletion
from apps.expenses.exceptions import (
    ExpenseNotFoundError,
    ExpensePermissionError,
    ExpenseSplitNotFoundError,
    InvalidExpenseError,
)
from apps.expenses.models import Expense, ExpenseStatus
from apps.expenses.services import ExpenseSplitService
from .conftest import EXPENSE_DATE


def person(name):
    return SimpleNamespace(id=uuid4(), name=name)


def amounts(expense):
    return {split.user.email: split.amount for split in expense.splits.select_related('user')}


class TestCalculateSplits:
    """The split arithmetic needs no database."""

    def test_remainder_goes_to_payer(self):
        payer, b, c = person('payer'), person('b'), person('c')

        shares = ExpenseSplitService._calculate_splits(Decimal('100.00'), [b, payer, c], payer)

        assert [amount for _, amount in shares] == [Decimal('33.33'), Decimal('33.34'), Decimal('33.33')]

    def test_remainder_goes_to_first_participant_when_payer_away(self):
        payer, b, c, d = person('payer'), person('b'), person('c'), person('d')

        shares = ExpenseSplitService._calculate_splits(Decimal('100.00'), [b, c, d], payer)

        assert shares[0] == (b, Decimal('33.34'))
        assert sum(amount for _, amount in shares) == Decimal('100.00')

    def test_negative_remainder(self):
        participants = [person(str(index)) for index in range(6)]

        shares = ExpenseSplitService._calculate_splits(Decimal('100.00'), participants, participants[0])

        assert shares[0][1] == Decimal('16.65')
        assert all(amount == Decimal('16.67') for _, amount in shares[1:])

    def test_tiny_amount_never_produces_negative_line(self):
        participants = [person(str(index)) for index in range(10)]

        shares = ExpenseSplitService._calculate_splits(Decimal('0.05'), participants, participants[0])

        assert all(amount >= 0 for _, amount in shares)
        assert sum(amount for _, amount in shares) == Decimal('0.05')

    @pytest.mark.parametrize('amount, count', [
        (Decimal('0.01'), 3),
        (Decimal('10.00'), 7),
        (Decimal('999.99'), 4),
        (Decimal('1234.57'), 9),
    ])
    def test_shares_sum_to_amount(self, amount, count):
        participants = [person(str(index)) for index in range(count)]

        shares = ExpenseSplitService._calculate_splits(amount, participants, participants[-1])

        assert sum(value for _, value in shares) == amount

    def test_no_participants(self):
        with pytest.raises(InvalidExpenseError):
            ExpenseSplitService._calculate_splits(Decimal('10.00'), [], person('payer'))


@pytest.mark.django_db
class TestCreateExpense:

    def test_three_way_split(self, grocery_expense, owner, admin_user, member_user):
        lines = amounts(grocery_expense)

        assert lines == {
            owner.email: Decimal('33.34'),
            admin_user.email: Decimal('33.33'),
            member_user.email: Decimal('33.33'),
        }
        assert grocery_expense.currency == 'AED'
        assert grocery_expense.status == ExpenseStatus.PENDING

    def test_payer_line_is_paid(self, grocery_expense, owner):
        payer_line = grocery_expense.splits.get(user=owner)
        other_lines = grocery_expense.splits.exclude(user=owner)

        assert payer_line.paid is True
        assert payer_line.paid_at is not None
        assert not any(line.paid for line in other_lines)

    def test_cook_is_not_split(self, grocery_expense, cook_user):
        assert not grocery_expense.splits.filter(user=cook_user).exists()

    def test_absent_member_is_not_split(self, organization_with_members, owner, member_user, away):
        away(member_user)

        expense, warnings = ExpenseSplitService.create_expense(
            organization=organization_with_members,
            paid_by=owner,
            amount=Decimal('90.00'),
            expense_date=EXPENSE_DATE,
        )

        assert warnings == []
        assert member_user.email not in amounts(expense)
        assert set(amounts(expense).values()) == {Decimal('45.00')}

    def test_member_pending_deletion_is_not_split(self, organization_with_members, owner, member_user):
        request_deletion(user=member_user)

        expense, _ = ExpenseSplitService.create_expense(
            organization=organization_with_members,
            paid_by=owner,
            amount=Decimal('10.00'),
            expense_date=EXPENSE_DATE,
        )

        assert member_user.email not in amounts(expense)

    def test_away_payer_still_pays_but_is_not_split(
        self, organization_with_members, owner, admin_user, member_user, away
    ):
        away(owner)

        expense, _ = ExpenseSplitService.create_expense(
            organization=organization_with_members,
            paid_by=owner,
            amount=Decimal('100.00'),
            expense_date=EXPENSE_DATE,
        )

        assert amounts(expense) == {
            admin_user.email: Decimal('50.00'),
            member_user.email: Decimal('50.00'),
        }
        assert expense.paid_by == owner

    def test_nobody_available_payer_carries_all(
        self, organization_with_members, owner, admin_user, member_user, away
    ):
        for user in (owner, admin_user, member_user):
            away(user)

        expense, warnings = ExpenseSplitService.create_expense(
            organization=organization_with_members,
            paid_by=owner,
            amount=Decimal('42.00'),
            expense_date=EXPENSE_DATE,
        )

        assert amounts(expense) == {owner.email: Decimal('42.00')}
        assert len(warnings) == 2
        assert expense.status == ExpenseStatus.FULLY_PAID

    @pytest.mark.parametrize('amount', [Decimal('0'), Decimal('-5.00')])
    def test_non_positive_amount_rejected(self, organization_with_members, owner, amount):
        with pytest.raises(InvalidExpenseError):
            ExpenseSplitService.create_expense(
                organization=organization_with_members,
                paid_by=owner,
                amount=amount,
                expense_date=EXPENSE_DATE,
            )

        assert Expense.objects.count() == 0

    def test_cook_cannot_be_payer(self, organization_with_members, cook_user):
        with pytest.raises(InvalidExpenseError):
            ExpenseSplitService.create_expense(
                organization=organization_with_members,
                paid_by=cook_user,
                amount=Decimal('10.00'),
                expense_date=EXPENSE_DATE,
            )

    def test_outsider_cannot_be_payer(self, organization_with_members, outsider):
        with pytest.raises(InvalidExpenseError):
            ExpenseSplitService.create_expense(
                organization=organization_with_members,
                paid_by=outsider,
                amount=Decimal('10.00'),
                expense_date=EXPENSE_DATE,
            )

    def test_splits_are_frozen(self, grocery_expense, member_user, away):
        before = amounts(grocery_expense)

        away(member_user)

        grocery_expense.refresh_from_db()
        assert amounts(grocery_expense) == before

    def test_foreign_currency_is_kept(self, organization_with_members, owner):
        expense, _ = ExpenseSplitService.create_expense(
            organization=organization_with_members,
            paid_by=owner,
            amount=Decimal('30.00'),
            expense_date=EXPENSE_DATE,
            currency='usd',
        )

        assert expense.currency == 'USD'


@pytest.mark.django_db
class TestMarkSplitPaid:

    def test_status_transitions(self, grocery_expense, admin_user, member_user):
        ExpenseSplitService.mark_split_paid(grocery_expense.id, admin_user.id, marked_by=admin_user)
        grocery_expense.refresh_from_db()
        assert grocery_expense.status == ExpenseStatus.PARTIALLY_PAID

        ExpenseSplitService.mark_split_paid(grocery_expense.id, member_user.id, marked_by=member_user)
        grocery_expense.refresh_from_db()
        assert grocery_expense.status == ExpenseStatus.FULLY_PAID

    def test_idempotent(self, grocery_expense, member_user):
        first_time = datetime(2025, 3, 6, 12, 0, tzinfo=dt_timezone.utc)
        later = datetime(2025, 3, 9, 12, 0, tzinfo=dt_timezone.utc)

        first = ExpenseSplitService.mark_split_paid(
            grocery_expense.id, member_user.id, marked_by=member_user, now=first_time
        )
        second = ExpenseSplitService.mark_split_paid(
            grocery_expense.id, member_user.id, marked_by=member_user, now=later
        )

        assert first.paid is True
        assert second.paid_at == first_time

    def test_payer_can_mark_others(self, grocery_expense, owner, member_user):
        split = ExpenseSplitService.mark_split_paid(grocery_expense.id, member_user.id, marked_by=owner)

        assert split.paid is True
        assert split.marked_paid_by == owner

    def test_other_member_cannot_mark(self, grocery_expense, admin_user, member_user, organization_with_members):
        # Demote the admin so only the line's user and the payer remain allowed
        membership = organization_with_members.memberships.get(user=admin_user)
        membership.role = 'member'
        membership.save()

        with pytest.raises(ExpensePermissionError):
            ExpenseSplitService.mark_split_paid(grocery_expense.id, member_user.id, marked_by=admin_user)

    def test_unknown_expense(self, member_user):
        with pytest.raises(ExpenseNotFoundError):
            ExpenseSplitService.mark_split_paid(uuid4(), member_user.id, marked_by=member_user)

    def test_user_without_line(self, grocery_expense, cook_user, owner):
        with pytest.raises(ExpenseSplitNotFoundError):
            ExpenseSplitService.mark_split_paid(grocery_expense.id, cook_user.id, marked_by=owner)


@pytest.mark.django_db
class TestSummaryAndStats:

    def test_summary(self, grocery_expense, member_user):
        ExpenseSplitService.mark_split_paid(grocery_expense.id, member_user.id, marked_by=member_user)

        summary = ExpenseSplitService.get_expense_summary(grocery_expense.id)

        assert summary['total_amount'] == Decimal('100.00')
        assert summary['collected_amount'] == Decimal('33.33')
        assert summary['outstanding_amount'] == Decimal('33.33')
        assert summary['paid_count'] == 2
        assert summary['unpaid_count'] == 1
        assert summary['is_fully_paid'] is False

    def test_stats(self, organization_with_members, owner, grocery_expense):
        ExpenseSplitService.create_expense(
            organization=organization_with_members,
            paid_by=owner,
            amount=Decimal('50.00'),
            expense_date=date(2025, 3, 20),
            category='utilities',
        )

        stats = ExpenseSplitService.get_expense_stats(organization_with_members.expenses.all())

        assert stats['overall']['count'] == 2
        assert stats['overall']['total'] == Decimal('150.00')
        assert stats['overall']['average'] == Decimal('75.00')
        assert stats['overall']['maximum'] == Decimal('100.00')
        assert stats['overall']['minimum'] == Decimal('50.00')
        assert [row['category'] for row in stats['by_category']] == ['groceries', 'utilities']

    def test_stats_empty(self, organization):
        stats = ExpenseSplitService.get_expense_stats(organization.expenses.all())

        assert stats['overall']['count'] == 0
        assert stats['overall']['total'] == Decimal('0.00')
        assert stats['by_category'] == []


@pytest.mark.django_db
class TestUpdateAndDelete:

    def test_update_descriptive_fields(self, grocery_expense, owner):
        expense = ExpenseSplitService.update_expense(
            grocery_expense, owner, description='Market', category='food'
        )

        assert expense.description == 'Market'
        assert expense.category == 'food'

    def test_amount_is_immutable(self, grocery_expense, owner):
        with pytest.raises(InvalidExpenseError):
            ExpenseSplitService.update_expense(grocery_expense, owner, amount=Decimal('1.00'))

    def test_member_cannot_update_others_expense(self, grocery_expense, member_user):
        with pytest.raises(ExpensePermissionError):
            ExpenseSplitService.update_expense(grocery_expense, member_user, notes='mine now')

    def test_member_cannot_delete(self, grocery_expense, member_user):
        with pytest.raises(ExpensePermissionError):
            ExpenseSplitService.delete_expense(grocery_expense, member_user)

    def test_admin_can_delete(self, grocery_expense, admin_user):
        ExpenseSplitService.delete_expense(grocery_expense, admin_user)

        assert not Expense.objects.filter(id=grocery_expense.id).exists()
