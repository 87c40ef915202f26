"""
Account deletion lifecycle service.

State machine::

    active --request_deletion--> pending_deletion
    pending_deletion --recover_account / cancel_deletion--> active
    pending_deletion --(external purge job, now >= scheduled)--> purged

"active" is the absence of a pending request. Every transition locks the
user row so two concurrent requests cannot both pass the guard.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import AccountDeletionRequest, DeletionReason, DeletionStatus
from apps.accounts.signals import deletion_requested, account_recovered, deletion_cancelled

from .exceptions import (
    DeletionAlreadyRequestedError,
    NoPendingDeletionError,
    RecoveryWindowExpiredError,
)

User = get_user_model()
logger = logging.getLogger(__name__)


def _grace_period() -> timedelta:
    return timedelta(days=settings.ACCOUNT_DELETION_GRACE_DAYS)


def _pending_request(user) -> Optional[AccountDeletionRequest]:
    return (
        AccountDeletionRequest.objects
        .select_for_update()
        .filter(user=user, status=DeletionStatus.PENDING_DELETION)
        .first()
    )


@transaction.atomic
def request_deletion(
    *,
    user: User,
    reason: str = DeletionReason.OTHER,
    reason_text: str = '',
    now: Optional[datetime] = None
) -> AccountDeletionRequest:
    """
    Schedule the user's account for deletion after the grace period.

    Args:
        user: Account to delete
        reason: One of DeletionReason values
        reason_text: Optional free-text feedback (max 500 chars)
        now: Current time (defaults to timezone.now())

    Returns:
        The pending AccountDeletionRequest

    Raises:
        DeletionAlreadyRequestedError: If a request is already pending
    """
    now = now or timezone.now()

    # Serialize transitions for this user
    User.objects.select_for_update().get(pk=user.pk)

    if _pending_request(user) is not None:
        raise DeletionAlreadyRequestedError("Account is already scheduled for deletion")

    deletion = AccountDeletionRequest.objects.create(
        user=user,
        status=DeletionStatus.PENDING_DELETION,
        reason=reason,
        reason_text=reason_text,
        requested_at=now,
        scheduled_deletion_at=now + _grace_period(),
    )

    logger.info(
        "Deletion requested for user %s, scheduled at %s",
        user.id, deletion.scheduled_deletion_at.isoformat()
    )
    transaction.on_commit(
        lambda: deletion_requested.send(sender=AccountDeletionRequest, deletion_request=deletion)
    )
    return deletion


def _restore(user, new_status, now) -> AccountDeletionRequest:
    User.objects.select_for_update().get(pk=user.pk)

    deletion = _pending_request(user)
    if deletion is None:
        raise NoPendingDeletionError("Account is not scheduled for deletion")

    if not deletion.can_recover(now):
        raise RecoveryWindowExpiredError(
            "The recovery period for this account has ended",
            scheduled_deletion_at=deletion.scheduled_deletion_at.isoformat(),
        )

    deletion.status = new_status
    deletion.resolved_at = now
    deletion.save(update_fields=['status', 'resolved_at'])
    return deletion


@transaction.atomic
def recover_account(*, user: User, now: Optional[datetime] = None) -> AccountDeletionRequest:
    """
    Restore an account from the recovery page.

    Succeeds only strictly before ``scheduled_deletion_at``.

    Raises:
        NoPendingDeletionError: If nothing is scheduled
        RecoveryWindowExpiredError: If now >= scheduled_deletion_at
    """
    now = now or timezone.now()
    deletion = _restore(user, DeletionStatus.RECOVERED, now)

    logger.info("Account %s recovered", user.id)
    transaction.on_commit(
        lambda: account_recovered.send(sender=AccountDeletionRequest, deletion_request=deletion)
    )
    return deletion


@transaction.atomic
def cancel_deletion(*, user: User, now: Optional[datetime] = None) -> AccountDeletionRequest:
    """
    Cancel a scheduled deletion from the account settings.

    Same guard as recover_account.
    """
    now = now or timezone.now()
    deletion = _restore(user, DeletionStatus.CANCELLED, now)

    logger.info("Deletion cancelled for account %s", user.id)
    transaction.on_commit(
        lambda: deletion_cancelled.send(sender=AccountDeletionRequest, deletion_request=deletion)
    )
    return deletion


def get_deletion_status(*, user: User, now: Optional[datetime] = None) -> dict:
    """
    Describe the user's deletion state for the settings and recovery pages.

    Returns:
        dict with has_deletion_request, is_scheduled_for_deletion and,
        when a request exists, deletion_request details including
        days_remaining and can_recover.
    """
    now = now or timezone.now()
    latest = user.deletion_requests.order_by('-requested_at').first()

    if latest is None:
        return {
            'has_deletion_request': False,
            'is_scheduled_for_deletion': False,
            'deletion_request': None,
        }

    return {
        'has_deletion_request': True,
        'is_scheduled_for_deletion': latest.status == DeletionStatus.PENDING_DELETION,
        'deletion_request': {
            'id': latest.id,
            'status': latest.status,
            'reason': latest.reason,
            'reason_text': latest.reason_text,
            'requested_at': latest.requested_at,
            'scheduled_deletion_at': latest.scheduled_deletion_at,
            'days_remaining': latest.days_remaining(now),
            'can_recover': latest.can_recover(now),
        },
    }
