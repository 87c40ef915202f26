"""
Advance payment ledger.

Advance payments are recorded against an organization and, once approved,
credit the payer and debit the receiver in the monthly settlement.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.organizations.models import Organization
from .exceptions import (
    AdvancePaymentAlreadyReviewedError,
    AdvancePaymentPermissionError,
    InvalidAdvancePaymentError,
)
from .models import AdvancePayment, AdvancePaymentStatus

logger = logging.getLogger(__name__)


def create_payment(
    *,
    organization: Organization,
    user: User,
    amount: Decimal,
    payment_date: date,
    added_by: User,
    received_by: Optional[User] = None,
    description: str = ''
) -> AdvancePayment:
    """
    Record an advance payment by ``user``.

    The payment starts approved, or pending when the organization requires
    reviews. ``received_by`` defaults to the organization owner.

    Raises:
        InvalidAdvancePaymentError: If amount <= 0, or payer or receiver
            are not members
        AdvancePaymentPermissionError: If added_by records a payment for
            someone else without being an admin
    """
    if amount <= 0:
        raise InvalidAdvancePaymentError("Amount must be greater than zero", amount=amount)

    received_by = received_by or organization.owner

    if not organization.has_member(user):
        raise InvalidAdvancePaymentError("Payer must be a member of the organization", user=user.id)
    if not organization.has_member(received_by):
        raise InvalidAdvancePaymentError(
            "Receiver must be a member of the organization", received_by=received_by.id
        )
    if added_by.id != user.id and not organization.is_admin(added_by):
        raise AdvancePaymentPermissionError("Only admins can record payments for other members")

    payment_status = (
        AdvancePaymentStatus.PENDING
        if organization.advance_payment_review_required
        else AdvancePaymentStatus.APPROVED
    )

    payment = AdvancePayment.objects.create(
        organization=organization,
        user=user,
        received_by=received_by,
        amount=amount,
        payment_date=payment_date,
        description=description,
        status=payment_status,
        added_by=added_by,
    )

    logger.info(
        "Advance payment %s of %s by user %s to %s recorded as %s",
        payment.id, amount, user.id, received_by.id, payment_status
    )
    return payment


@transaction.atomic
def review_payment(
    *,
    payment: AdvancePayment,
    reviewer: User,
    approve: bool,
    now: Optional[datetime] = None
) -> AdvancePayment:
    """
    Approve or reject a pending payment (admin only).

    Raises:
        AdvancePaymentPermissionError: If reviewer is not an admin
        AdvancePaymentAlreadyReviewedError: If the payment is not pending
    """
    payment = (
        AdvancePayment.objects
        .select_for_update()
        .select_related('organization')
        .get(pk=payment.pk)
    )

    if not payment.organization.is_admin(reviewer):
        raise AdvancePaymentPermissionError("Only organization admins can review advance payments")

    if payment.status != AdvancePaymentStatus.PENDING:
        raise AdvancePaymentAlreadyReviewedError(
            f"Payment is already {payment.status}", status=payment.status
        )

    payment.status = AdvancePaymentStatus.APPROVED if approve else AdvancePaymentStatus.REJECTED
    payment.reviewed_by = reviewer
    payment.reviewed_at = now or timezone.now()
    payment.save(update_fields=['status', 'reviewed_by', 'reviewed_at'])

    logger.info("Advance payment %s %s by %s", payment.id, payment.status, reviewer.id)
    return payment


def delete_payment(*, payment: AdvancePayment, user: User) -> None:
    """Delete a payment; allowed for whoever added it and for admins."""
    if user.id != payment.added_by_id and not payment.organization.is_admin(user):
        raise AdvancePaymentPermissionError("Only the member who added this payment or an admin can delete it")

    logger.info("Advance payment %s deleted by %s", payment.id, user.id)
    payment.delete()
