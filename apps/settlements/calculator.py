"""
Balance and settlement arithmetic.

Pure functions over plain records; nothing here touches the ORM, so the
monthly settlement can be computed and tested from any data source.

Sign convention: a positive ``net`` means the member owes the group, a
negative one means the group owes the member.

    net = owes - owed - advance_paid + advance_received

Example::

    balances, warnings = calculate_balances(expenses, advances, member_ids, 'AED')
    transfers = settle(balances)
    # A net +50, B net -50  ->  [Transfer(A, B, Decimal('50.00'))]
"""

import heapq
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from apps.common.exceptions import LedgerInconsistentError

ZERO = Decimal('0.00')
CENT = Decimal('0.01')


class SplitLine(NamedTuple):
    user_id: object
    amount: Decimal
    paid: bool


class ExpenseEntry(NamedTuple):
    expense_id: object
    paid_by_id: object
    amount: Decimal
    currency: str
    splits: Tuple[SplitLine, ...]


class AdvanceEntry(NamedTuple):
    payment_id: object
    user_id: object
    received_by_id: object
    amount: Decimal


class MemberBalance(NamedTuple):
    user_id: object
    owes: Decimal
    owed: Decimal
    advance_paid: Decimal
    advance_received: Decimal
    net: Decimal


class Transfer(NamedTuple):
    from_user_id: object
    to_user_id: object
    amount: Decimal


def check_expense(expense: ExpenseEntry) -> None:
    """Raise LedgerInconsistentError unless the split lines sum to the amount."""
    total = sum((line.amount for line in expense.splits), ZERO)
    if total != expense.amount:
        raise LedgerInconsistentError(
            f"Splits of expense {expense.expense_id} do not add up to its amount",
            expense_id=expense.expense_id,
            discrepancy=expense.amount - total,
        )


def calculate_balances(
    expenses: Iterable[ExpenseEntry],
    advances: Iterable[AdvanceEntry],
    member_ids: Sequence,
    currency: Optional[str] = None,
) -> Tuple[List[MemberBalance], List[str]]:
    """
    Per-member balances for a set of expenses and approved advances.

    Expenses in a currency other than ``currency`` are skipped and reported
    in the warnings. Members who appear in the ledger but not in
    ``member_ids`` (e.g. someone who left mid-month) still get a row.

    Raises:
        LedgerInconsistentError: If an expense's lines do not sum to its
            amount, or positive and negative nets do not cancel out.
    """
    owes: Dict[object, Decimal] = {}
    owed: Dict[object, Decimal] = {}
    advance_paid: Dict[object, Decimal] = {}
    advance_received: Dict[object, Decimal] = {}
    order = list(member_ids)
    skipped = {}

    def track(user_id):
        if user_id not in owes:
            owes[user_id] = owed[user_id] = ZERO
            advance_paid[user_id] = advance_received[user_id] = ZERO
            if user_id not in order:
                order.append(user_id)

    for user_id in member_ids:
        track(user_id)

    for expense in expenses:
        if currency and expense.currency != currency:
            skipped[expense.currency] = skipped.get(expense.currency, 0) + 1
            continue

        check_expense(expense)
        track(expense.paid_by_id)

        for line in expense.splits:
            track(line.user_id)
            if line.paid or line.user_id == expense.paid_by_id:
                continue
            owes[line.user_id] += line.amount
            owed[expense.paid_by_id] += line.amount

    for advance in advances:
        track(advance.user_id)
        track(advance.received_by_id)
        advance_paid[advance.user_id] += advance.amount
        advance_received[advance.received_by_id] += advance.amount

    balances = [
        MemberBalance(
            user_id=user_id,
            owes=owes[user_id],
            owed=owed[user_id],
            advance_paid=advance_paid[user_id],
            advance_received=advance_received[user_id],
            net=owes[user_id] - owed[user_id] - advance_paid[user_id] + advance_received[user_id],
        )
        for user_id in order
    ]

    check_conservation(balances)

    warnings = [
        f"Skipped {count} expense(s) in {code}; only {currency} is settled"
        for code, count in sorted(skipped.items())
    ]
    return balances, warnings


def check_conservation(balances: Iterable[MemberBalance]) -> None:
    """What debtors owe must equal what creditors are owed."""
    balances = list(balances)
    debit = sum((b.net for b in balances if b.net > 0), ZERO)
    credit = sum((-b.net for b in balances if b.net < 0), ZERO)
    if debit != credit:
        raise LedgerInconsistentError(
            "Balances do not net to zero",
            discrepancy=debit - credit,
        )


def settle(balances: Iterable[MemberBalance], tolerance: Decimal = CENT) -> List[Transfer]:
    """
    Greedy settlement: the largest debtor pays the largest creditor.

    Every non-zero net is matched, down to a single cent. Each step
    transfers ``min(debt, credit)`` and puts any remainder back. Ties
    between equal amounts are broken by the member id's string form, so the
    result is deterministic.

    Raises:
        LedgerInconsistentError: If a member is left more than ``tolerance``
            away from zero, i.e. the nets did not cancel out.
    """
    debtors = []
    creditors = []

    for balance in balances:
        if balance.net > 0:
            heapq.heappush(debtors, (-balance.net, str(balance.user_id), balance.user_id))
        elif balance.net < 0:
            heapq.heappush(creditors, (balance.net, str(balance.user_id), balance.user_id))

    transfers = []
    while debtors and creditors:
        debt, debtor_key, debtor = heapq.heappop(debtors)
        credit, creditor_key, creditor = heapq.heappop(creditors)
        debt, credit = -debt, -credit

        amount = min(debt, credit)
        transfers.append(Transfer(debtor, creditor, amount.quantize(CENT, rounding=ROUND_HALF_UP)))

        if debt - amount > 0:
            heapq.heappush(debtors, (-(debt - amount), debtor_key, debtor))
        if credit - amount > 0:
            heapq.heappush(creditors, (-(credit - amount), creditor_key, creditor))

    residual = sum((-entry[0] for entry in debtors + creditors), ZERO)
    if residual > tolerance:
        raise LedgerInconsistentError(
            "Balances could not be settled",
            discrepancy=residual,
        )

    return transfers
