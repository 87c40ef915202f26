from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Custom user model with email authentication."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    name = models.CharField(max_length=100, blank=True)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['created_at'], name='users_created_idx'),
        ]

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return name or email prefix."""
        return self.name or self.email.split('@')[0]

    @property
    def is_pending_deletion(self):
        return self.deletion_requests.filter(
            status=DeletionStatus.PENDING_DELETION
        ).exists()


class DeletionStatus(models.TextChoices):
    PENDING_DELETION = 'pending_deletion', 'Pending deletion'
    RECOVERED = 'recovered', 'Recovered'
    CANCELLED = 'cancelled', 'Cancelled'
    PURGED = 'purged', 'Purged'


class DeletionReason(models.TextChoices):
    NO_LONGER_NEEDED = 'no_longer_needed', 'No longer needed'
    SWITCHING_SERVICE = 'switching_service', 'Switching to another service'
    PRIVACY_CONCERNS = 'privacy_concerns', 'Privacy concerns'
    TOO_EXPENSIVE = 'too_expensive', 'Too expensive'
    TECHNICAL_ISSUES = 'technical_issues', 'Technical issues'
    OTHER = 'other', 'Other'


class AccountDeletionRequest(models.Model):
    """A scheduled account deletion with a recovery grace period."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='deletion_requests'
    )
    status = models.CharField(
        max_length=20,
        choices=DeletionStatus.choices,
        default=DeletionStatus.PENDING_DELETION
    )
    reason = models.CharField(
        max_length=30,
        choices=DeletionReason.choices,
        default=DeletionReason.OTHER
    )
    reason_text = models.CharField(max_length=500, blank=True)

    requested_at = models.DateTimeField()
    scheduled_deletion_at = models.DateTimeField()
    # Set when the request is recovered, cancelled or purged
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'account_deletion_requests'
        indexes = [
            models.Index(fields=['user', 'status'], name='deletion_user_status_idx'),
            models.Index(fields=['status', 'scheduled_deletion_at'], name='deletion_due_idx'),
        ]
        ordering = ['-requested_at']

    def __str__(self):
        return f"{self.user.email} ({self.status}, due {self.scheduled_deletion_at:%Y-%m-%d})"

    def can_recover(self, now):
        return (
            self.status == DeletionStatus.PENDING_DELETION and
            now < self.scheduled_deletion_at
        )

    def days_remaining(self, now):
        """Whole days left before the purge, rounded up, never negative."""
        remaining = self.scheduled_deletion_at - now
        if remaining.total_seconds() <= 0:
            return 0
        return remaining.days + (1 if remaining.seconds or remaining.microseconds else 0)
