import pytest
from datetime import date

from apps.availability.models import AvailabilityRecord


@pytest.fixture
def member_absence(db, member_user):
    """Member away for the first half of March 2025."""
    return AvailabilityRecord.objects.create(
        user=member_user,
        start_date=date(2025, 3, 1),
        end_date=date(2025, 3, 14),
        reason='Visiting family',
        created_by=member_user,
    )
