"""
Settlement Queries
==================

Loads an organization's month from the database and runs the pure
calculator over it.

Classes:
    SettlementQueries: Static methods returning plain dictionaries.

Example::

    from apps.settlements.queries import SettlementQueries

    report = SettlementQueries.monthly_settlement(organization, 2025, 3)
    report['transfers']
    # [{'from_user': <User admin@...>, 'to_user': <User owner@...>, 'amount': Decimal('33.33')}, ...]
"""

import logging

from django.conf import settings

from apps.accounts.models import User
from apps.advance_payments.models import AdvancePayment, AdvancePaymentStatus
from apps.common.periods import month_bounds
from apps.expenses.models import Expense
from .calculator import (
    AdvanceEntry,
    ExpenseEntry,
    SplitLine,
    ZERO,
    calculate_balances,
    settle,
)

logger = logging.getLogger(__name__)


class SettlementQueries:
    """
    Read-only queries behind the settlement endpoints.

    Methods:
        load_month: Expense and advance entries for a calendar month.
        monthly_settlement: Balances, transfers and warnings for a month.
    """

    @staticmethod
    def load_month(organization, year, month):
        """
        Plain calculator records for ``organization`` in (year, month).

        Returns:
            tuple: ``(expenses, advances)`` as lists of ExpenseEntry and
            AdvanceEntry. Only approved advances are included.
        """
        first_day, last_day = month_bounds(year, month)

        expenses = [
            ExpenseEntry(
                expense_id=expense.id,
                paid_by_id=expense.paid_by_id,
                amount=expense.amount,
                currency=expense.currency,
                splits=tuple(
                    SplitLine(split.user_id, split.amount, split.paid)
                    for split in expense.splits.all()
                ),
            )
            for expense in (
                Expense.objects
                .filter(organization=organization, expense_date__range=(first_day, last_day))
                .prefetch_related('splits')
                .order_by('expense_date', 'created_at')
            )
        ]

        advances = [
            AdvanceEntry(payment.id, payment.user_id, payment.received_by_id, payment.amount)
            for payment in AdvancePayment.objects.filter(
                organization=organization,
                status=AdvancePaymentStatus.APPROVED,
                payment_date__range=(first_day, last_day),
            )
        ]

        return expenses, advances

    @staticmethod
    def monthly_settlement(organization, year, month):
        """
        Balances and the transfers that settle them for one month.

        Args:
            organization (Organization): Tenant to settle.
            year (int): Calendar year.
            month (int): Calendar month, 1-12.

        Returns:
            dict: organization, year, month, currency, total_expenses,
            total_advances, balances (with user objects), transfers (with
            user objects) and warnings.

        Raises:
            InvalidInputError: If month is out of range.
            LedgerInconsistentError: If the stored ledger does not reconcile.
        """
        expenses, advances = SettlementQueries.load_month(organization, year, month)

        member_ids = list(
            organization.memberships
            .order_by('joined_at')
            .values_list('user_id', flat=True)
        )

        balances, warnings = calculate_balances(
            expenses, advances, member_ids, currency=organization.currency
        )
        transfers = settle(balances, tolerance=settings.SETTLEMENT_TOLERANCE)

        users = User.objects.in_bulk([balance.user_id for balance in balances])

        logger.info(
            "Settled %04d-%02d for organization %s: %d balances, %d transfers",
            year, month, organization.id, len(balances), len(transfers)
        )

        return {
            'organization': organization.id,
            'year': year,
            'month': month,
            'currency': organization.currency,
            'total_expenses': sum(
                (e.amount for e in expenses if e.currency == organization.currency), ZERO
            ),
            'total_advances': sum((a.amount for a in advances), ZERO),
            'balances': [
                dict(balance._asdict(), user=users[balance.user_id])
                for balance in balances
            ],
            'transfers': [
                {
                    'from_user': users[transfer.from_user_id],
                    'to_user': users[transfer.to_user_id],
                    'amount': transfer.amount,
                }
                for transfer in transfers
            ],
            'warnings': warnings,
        }
