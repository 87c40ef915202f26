from django.db import models
import uuid


class AvailabilityStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    CANCELLED = 'cancelled', 'Cancelled'


class AvailabilityRecord(models.Model):
    """
    A period during which a member is away.

    Only active records make a member unavailable; the range is inclusive
    on both ends.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='availability_records'
    )
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.CharField(max_length=255, blank=True)
    status = models.CharField(
        max_length=20,
        choices=AvailabilityStatus.choices,
        default=AvailabilityStatus.ACTIVE
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_availability_records'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'availability_records'
        ordering = ['-start_date']
        indexes = [
            models.Index(fields=['user', 'status', 'start_date'], name='avail_user_status_idx'),
        ]

    def __str__(self):
        return f"{self.user.email} away {self.start_date} - {self.end_date} ({self.status})"

    @property
    def duration_days(self):
        """Length of the absence, counting both ends."""
        return (self.end_date - self.start_date).days + 1

    def covers(self, on_date):
        return self.start_date <= on_date <= self.end_date
