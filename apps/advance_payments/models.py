from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class AdvancePaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class AdvancePayment(models.Model):
    """
    Money a member hands over ahead of settlement.

    ``user`` paid, ``received_by`` (the organization owner unless stated)
    took the money. Only approved payments count toward balances.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.CASCADE,
        related_name='advance_payments'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='advance_payments'
    )
    received_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='received_advance_payments'
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_date = models.DateField()
    description = models.CharField(max_length=255, blank=True)
    status = models.CharField(
        max_length=20,
        choices=AdvancePaymentStatus.choices,
        default=AdvancePaymentStatus.APPROVED
    )
    added_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='added_advance_payments'
    )
    reviewed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_advance_payments'
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'advance_payments'
        ordering = ['-payment_date', '-created_at']
        indexes = [
            models.Index(fields=['organization', 'payment_date'], name='advance_org_date_idx'),
            models.Index(fields=['organization', 'status'], name='advance_org_status_idx'),
        ]

    def __str__(self):
        return f"{self.user.email} advanced {self.amount} on {self.payment_date} ({self.status})"
