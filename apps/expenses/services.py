"""
Expense Services Module
=======================

Business logic for shared expenses: availability-aware equal splitting,
marking lines paid and the summaries built on top of them.

Classes:
    ExpenseSplitService: Creates expenses and manages their split lines.

Example:
    Recording a grocery run::

        from apps.expenses.services import ExpenseSplitService
        from decimal import Decimal

        expense, warnings = ExpenseSplitService.create_expense(
            organization=flat,
            paid_by=request.user,
            amount=Decimal('100.00'),
            expense_date=date.today(),
            category='groceries',
        )
        # Three members at home: payer 33.34, the others 33.33 each
"""

import logging
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Avg, Count, Max, Min, Sum
from django.utils import timezone

from apps.availability.services import available_members
from apps.organizations.services import get_split_eligible_members
from .exceptions import (
    ExpenseNotFoundError,
    ExpensePermissionError,
    ExpenseSplitNotFoundError,
    InvalidExpenseError,
)
from .models import Expense, ExpenseCategory, ExpenseSplit

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')

EDITABLE_FIELDS = ('description', 'category', 'notes')


class ExpenseSplitService:
    """
    Service for creating shared expenses and reconciling their splits.

    An expense is split equally among the split-eligible members who are
    at home on ``expense_date``. Shares are rounded half-up to cents and
    the rounding remainder is absorbed by a single line, so the lines
    always sum exactly to the expense amount.

    Methods:
        create_expense: Create an expense and its split lines.
        mark_split_paid: Mark one participant's line as paid (idempotent).
        get_expense_summary: Collected / outstanding breakdown.
        get_expense_stats: Aggregates over an organization's expenses.
        update_expense: Change descriptive fields.
        delete_expense: Remove an expense and its lines.
    """

    @staticmethod
    def create_expense(
        organization,
        paid_by,
        amount,
        expense_date,
        description='',
        category=ExpenseCategory.OTHER,
        notes='',
        currency=None,
        created_by=None
    ):
        """
        Create an expense split among members available on its date.

        Availability is read once, inside this transaction, and the
        resulting lines are never recomputed.

        Args:
            organization (Organization): Tenant the expense belongs to.
            paid_by (User): Member who paid; must be split-eligible.
            amount (Decimal): Positive amount with two decimals.
            expense_date (date): Day the money was spent.
            description (str, optional): Short description.
            category (str, optional): One of ExpenseCategory values.
            notes (str, optional): Free-text notes.
            currency (str, optional): Defaults to the organization currency.
            created_by (User, optional): Defaults to paid_by.

        Returns:
            tuple: ``(Expense, list[str])`` - the expense and any warnings,
            e.g. that nobody else was home and the payer carries it all.

        Raises:
            InvalidExpenseError: If amount <= 0 or paid_by cannot share
                expenses in this organization.
        """
        amount = Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
        if amount <= 0:
            raise InvalidExpenseError("Amount must be greater than zero", amount=amount)

        with transaction.atomic():
            eligible = get_split_eligible_members(organization=organization)
            if paid_by.id not in {member.id for member in eligible}:
                raise InvalidExpenseError(
                    "Payer must be an active, non-cook member of the organization",
                    paid_by=paid_by.id,
                )

            participants, warnings = available_members(expense_date, eligible)

            expense = Expense.objects.create(
                organization=organization,
                paid_by=paid_by,
                amount=amount,
                currency=(currency or organization.currency).upper(),
                description=description,
                category=category,
                notes=notes,
                expense_date=expense_date,
                created_by=created_by or paid_by,
            )

            if participants:
                shares = ExpenseSplitService._calculate_splits(amount, participants, paid_by)
            else:
                warnings.append(
                    f"Nobody is available on {expense_date.isoformat()}; "
                    f"{paid_by.get_display_name()} carries the whole amount"
                )
                shares = [(paid_by, amount)]

            now = timezone.now()
            ExpenseSplit.objects.bulk_create([
                ExpenseSplit(
                    expense=expense,
                    user=user,
                    amount=share,
                    # Nothing to collect from the payer or for an empty line
                    paid=user.id == paid_by.id or share == 0,
                    paid_at=now if user.id == paid_by.id or share == 0 else None,
                )
                for user, share in shares
            ])

            expense.status = expense.compute_status()
            expense.save(update_fields=['status'])

        logger.info(
            "Expense %s of %s %s split among %d members of organization %s",
            expense.id, amount, expense.currency, len(shares), organization.id
        )
        for warning in warnings:
            logger.warning("Expense %s: %s", expense.id, warning)

        return expense, warnings

    @staticmethod
    def _calculate_splits(amount, participants, payer):
        """
        Split ``amount`` equally among ``participants`` to the cent.

        Algorithm:
            1. ``share = round(amount / n, 2)`` half-up
            2. ``remainder = amount - n * share`` (may be negative)
            3. The payer's line absorbs the remainder; when the payer is
               away, the first participant's line does.

        If the absorbing line would drop below zero (only possible for
        amounts of a few cents), shares are rounded down instead so the
        remainder is never negative.

        Args:
            amount (Decimal): Total to split.
            participants (list[User]): Members sharing the expense, in order.
            payer (User): Member who paid.

        Returns:
            list[tuple]: ``(User, Decimal)`` pairs summing exactly to amount.

        Example:
            100.00 among three, payer first::

                [(payer, Decimal('33.34')),
                 (user2, Decimal('33.33')),
                 (user3, Decimal('33.33'))]
        """
        if not participants:
            raise InvalidExpenseError("At least one participant required")

        count = len(participants)
        absorber = next(
            (index for index, user in enumerate(participants) if user.id == payer.id),
            0
        )

        share = (amount / count).quantize(CENT, rounding=ROUND_HALF_UP)
        remainder = amount - share * count
        if share + remainder < 0:
            share = (amount / count).quantize(CENT, rounding=ROUND_DOWN)
            remainder = amount - share * count

        shares = [
            (user, share + remainder if index == absorber else share)
            for index, user in enumerate(participants)
        ]

        total_check = sum(value for _, value in shares)
        if total_check != amount:
            raise InvalidExpenseError(f"Split calculation error: {total_check} != {amount}")

        return shares

    @staticmethod
    def mark_split_paid(expense_id, user_id, marked_by, now=None):
        """
        Mark ``user_id``'s line of an expense as paid.

        Idempotent: the first call sets ``paid_at``; repeated calls return
        the line unchanged. Allowed for the line's user, the payer and
        organization admins.

        Raises:
            ExpenseNotFoundError: If the expense does not exist.
            ExpenseSplitNotFoundError: If the user has no line on it.
            ExpensePermissionError: If marked_by may not mark this line.
        """
        with transaction.atomic():
            try:
                expense = (
                    Expense.objects
                    .select_for_update()
                    .select_related('organization')
                    .get(id=expense_id)
                )
            except Expense.DoesNotExist:
                raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

            try:
                split = expense.splits.select_for_update().get(user_id=user_id)
            except ExpenseSplit.DoesNotExist:
                raise ExpenseSplitNotFoundError("User has no share in this expense", user_id=user_id)

            allowed = (
                marked_by.id == split.user_id or
                marked_by.id == expense.paid_by_id or
                expense.organization.is_admin(marked_by)
            )
            if not allowed:
                raise ExpensePermissionError("You cannot mark this share as paid")

            if split.paid:
                return split

            split.paid = True
            split.paid_at = now or timezone.now()
            split.marked_paid_by = marked_by
            split.save(update_fields=['paid', 'paid_at', 'marked_paid_by'])

            expense.status = expense.compute_status()
            expense.save(update_fields=['status', 'updated_at'])

        logger.info("Share of user %s in expense %s marked paid by %s", user_id, expense_id, marked_by.id)
        return split

    @staticmethod
    def get_expense_summary(expense_id):
        """
        Collected and outstanding amounts of an expense.

        Returns:
            dict: expense, total_amount, collected_amount,
            outstanding_amount, is_fully_paid, total_shares, paid_count,
            unpaid_count, paid_shares, unpaid_shares.
        """
        try:
            expense = Expense.objects.prefetch_related('splits__user').get(id=expense_id)
        except Expense.DoesNotExist:
            raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

        splits = list(expense.splits.all())
        paid_shares = [split for split in splits if split.paid]
        unpaid_shares = [split for split in splits if not split.paid]

        return {
            'expense': expense,
            'total_amount': expense.amount,
            'collected_amount': expense.collected_amount,
            'outstanding_amount': expense.outstanding_amount,
            'is_fully_paid': not unpaid_shares,
            'total_shares': len(splits),
            'paid_count': len(paid_shares),
            'unpaid_count': len(unpaid_shares),
            'paid_shares': paid_shares,
            'unpaid_shares': unpaid_shares,
        }

    @staticmethod
    def get_expense_stats(queryset):
        """
        Aggregate an already-filtered expense queryset.

        Returns:
            dict: ``overall`` (count, total, average, maximum, minimum) and
            ``by_category`` (the same per category, largest total first).
        """
        aggregates = dict(
            count=Count('id'),
            total=Sum('amount'),
            average=Avg('amount'),
            maximum=Max('amount'),
            minimum=Min('amount'),
        )

        overall = queryset.aggregate(**aggregates)
        by_category = (
            queryset
            .order_by()
            .values('category')
            .annotate(**aggregates)
            .order_by('-total')
        )

        def clean(row):
            row = dict(row)
            for key in ('total', 'average', 'maximum', 'minimum'):
                value = row[key]
                row[key] = Decimal(value or 0).quantize(CENT, rounding=ROUND_HALF_UP)
            return row

        return {
            'overall': clean(overall),
            'by_category': [clean(row) for row in by_category],
        }

    @staticmethod
    def can_manage(expense, user):
        """Creator, payer and organization admins may edit or delete."""
        return (
            user.id in (expense.created_by_id, expense.paid_by_id) or
            expense.organization.is_admin(user)
        )

    @staticmethod
    def update_expense(expense, user, **changes):
        """
        Update descriptive fields. Amount, payer and date are immutable
        because the split lines are frozen.
        """
        immutable = set(changes) - set(EDITABLE_FIELDS)
        if immutable:
            raise InvalidExpenseError(
                "Only description, category and notes can be changed",
                fields=', '.join(sorted(immutable)),
            )
        if not ExpenseSplitService.can_manage(expense, user):
            raise ExpensePermissionError("You cannot edit this expense")

        for field, value in changes.items():
            setattr(expense, field, value)
        expense.save(update_fields=[*changes, 'updated_at'])
        return expense

    @staticmethod
    def delete_expense(expense, user):
        if user.id != expense.created_by_id and not expense.organization.is_admin(user):
            raise ExpensePermissionError("Only the creator or an admin can delete this expense")

        logger.info("Expense %s deleted by %s", expense.id, user.id)
        expense.delete()
