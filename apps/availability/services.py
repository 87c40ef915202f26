"""
Availability Registry
=====================

Tracks member absences and answers "who was home on this date?". Expense
splitting asks this once per expense, inside its own transaction.

Functions:
    is_available: Whether a single user is home on a date.
    available_members: Filter a member list for a date, with warnings.
    create_availability: Record an absence.
    cancel_availability: Retire an absence so it no longer counts.
    current_status: Per-member availability snapshot for a date.

Example::

    from apps.availability.services import available_members

    result = available_members(expense.expense_date, members)
    for warning in result.warnings:
        logger.warning(warning)
"""
import logging
from datetime import date
from typing import List, NamedTuple, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.organizations.models import Organization, OrganizationRole
from .exceptions import (
    AvailabilityAlreadyCancelledError,
    AvailabilityPermissionError,
    InvalidAvailabilityPeriodError,
)
from .models import AvailabilityRecord, AvailabilityStatus

logger = logging.getLogger(__name__)


class AvailableMembers(NamedTuple):
    members: List[User]
    warnings: List[str]


def _active_absences(on_date):
    return AvailabilityRecord.objects.filter(
        status=AvailabilityStatus.ACTIVE,
        start_date__lte=on_date,
        end_date__gte=on_date,
    )


def is_available(user: User, on_date: date) -> bool:
    """False iff ``on_date`` falls inside an active absence of ``user``."""
    return not _active_absences(on_date).filter(user=user).exists()


def available_members(on_date: date, members: List[User]) -> AvailableMembers:
    """
    Keep the members who are home on ``on_date``, in their original order.

    An empty result is valid; it is reported as a warning, never raised.
    """
    away_ids = set(
        _active_absences(on_date)
        .filter(user__in=members)
        .values_list('user_id', flat=True)
    )
    present = [member for member in members if member.id not in away_ids]

    warnings = []
    if members and not present:
        warnings.append(f"No members are available on {on_date.isoformat()}")
    return AvailableMembers(present, warnings)


def _shares_admin_organization(admin: User, user: User) -> bool:
    """True if ``admin`` administers an organization ``user`` belongs to."""
    return Organization.objects.filter(
        memberships__user=admin,
        memberships__role__in=[OrganizationRole.OWNER, OrganizationRole.ADMIN],
    ).filter(
        memberships__user=user,
    ).exists()


def _can_manage(actor: User, record_user: User) -> bool:
    return actor.id == record_user.id or _shares_admin_organization(actor, record_user)


def create_availability(
    *,
    user: User,
    start_date: date,
    end_date: date,
    created_by: User,
    reason: str = ''
) -> AvailabilityRecord:
    """
    Record an absence for ``user``.

    Members record their own absences; admins may record one for any member
    of an organization they administer.

    Raises:
        InvalidAvailabilityPeriodError: If end_date precedes start_date or the
            absence is shorter than AVAILABILITY_MIN_ABSENCE_DAYS.
        AvailabilityPermissionError: If created_by may not manage user.
    """
    if end_date < start_date:
        raise InvalidAvailabilityPeriodError(
            "End date must not be before start date",
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
        )

    minimum = settings.AVAILABILITY_MIN_ABSENCE_DAYS
    duration = (end_date - start_date).days + 1
    if duration < minimum:
        raise InvalidAvailabilityPeriodError(
            f"Absence must last at least {minimum} days to count for expense splitting",
            duration_days=duration,
        )

    if not _can_manage(created_by, user):
        raise AvailabilityPermissionError("You can only record absences for yourself or members you administer")

    record = AvailabilityRecord.objects.create(
        user=user,
        start_date=start_date,
        end_date=end_date,
        reason=reason,
        created_by=created_by,
    )
    logger.info("Absence %s recorded for user %s: %s to %s", record.id, user.id, start_date, end_date)
    return record


@transaction.atomic
def cancel_availability(*, record: AvailabilityRecord, user: User) -> AvailabilityRecord:
    """
    Cancel an absence. Already-frozen expense splits are not touched.

    Raises:
        AvailabilityPermissionError: If user may not manage the record
        AvailabilityAlreadyCancelledError: If the record is not active
    """
    record = AvailabilityRecord.objects.select_for_update().select_related('user').get(pk=record.pk)

    if not _can_manage(user, record.user):
        raise AvailabilityPermissionError("You can only cancel your own absences or those of members you administer")

    if record.status != AvailabilityStatus.ACTIVE:
        raise AvailabilityAlreadyCancelledError("Absence is already cancelled")

    record.status = AvailabilityStatus.CANCELLED
    record.save(update_fields=['status', 'updated_at'])

    logger.info("Absence %s cancelled by user %s", record.id, user.id)
    return record


def current_status(members: List[User], on_date: Optional[date] = None) -> List[dict]:
    """
    Availability snapshot of ``members`` on ``on_date`` (default today).

    Returns:
        list[dict]: one entry per member with ``user``, ``is_available``
        and ``current_absence`` (start_date, end_date, reason,
        duration_days) or None.
    """
    on_date = on_date or timezone.localdate()

    absences = {}
    for record in _active_absences(on_date).filter(user__in=members).order_by('start_date'):
        absences.setdefault(record.user_id, record)

    statuses = []
    for member in members:
        record = absences.get(member.id)
        statuses.append({
            'user': member,
            'is_available': record is None,
            'current_absence': None if record is None else {
                'id': record.id,
                'start_date': record.start_date,
                'end_date': record.end_date,
                'reason': record.reason,
                'duration_days': record.duration_days,
            },
        })
    return statuses
