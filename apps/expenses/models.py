from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class ExpenseCategory(models.TextChoices):
    GROCERIES = 'groceries', 'Groceries'
    FOOD = 'food', 'Food'
    UTILITIES = 'utilities', 'Utilities'
    HOUSEHOLD = 'household', 'Household'
    OTHER = 'other', 'Other'


class ExpenseStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PARTIALLY_PAID = 'partially_paid', 'Partially paid'
    FULLY_PAID = 'fully_paid', 'Fully paid'


class Expense(models.Model):
    """
    A shared expense paid by one member and split among those at home.

    Splits are frozen at creation: later availability changes never
    rewrite them.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.CASCADE,
        related_name='expenses'
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=3)
    description = models.CharField(max_length=255, blank=True)
    category = models.CharField(
        max_length=20,
        choices=ExpenseCategory.choices,
        default=ExpenseCategory.OTHER
    )
    paid_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='paid_expenses'
    )
    expense_date = models.DateField(db_index=True)
    notes = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=ExpenseStatus.choices,
        default=ExpenseStatus.PENDING
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_expenses'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        ordering = ['-expense_date', '-created_at']
        indexes = [
            models.Index(fields=['organization', 'expense_date'], name='expense_org_date_idx'),
            models.Index(fields=['organization', 'status'], name='expense_org_status_idx'),
        ]

    def __str__(self):
        return f"{self.description or self.category} - {self.amount} {self.currency}"

    @property
    def collected_amount(self):
        """Sum of paid lines owed by members other than the payer."""
        return sum(
            (split.amount for split in self.splits.all()
             if split.paid and split.user_id != self.paid_by_id),
            Decimal('0.00')
        )

    @property
    def outstanding_amount(self):
        return sum(
            (split.amount for split in self.splits.all() if not split.paid),
            Decimal('0.00')
        )

    def compute_status(self):
        """
        Status from the lines the payer still has to collect.

        The payer's own line and zero-amount lines never need collecting.
        """
        collectable = [
            split for split in self.splits.all()
            if split.user_id != self.paid_by_id and split.amount > 0
        ]
        paid = sum(1 for split in collectable if split.paid)

        if paid == len(collectable):
            return ExpenseStatus.FULLY_PAID
        if paid:
            return ExpenseStatus.PARTIALLY_PAID
        return ExpenseStatus.PENDING


class ExpenseSplit(models.Model):
    """One participant's share of an expense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expense = models.ForeignKey(Expense, on_delete=models.CASCADE, related_name='splits')
    user = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='expense_splits')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)
    marked_paid_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='marked_expense_splits'
    )

    class Meta:
        db_table = 'expense_splits'
        unique_together = [['expense', 'user']]
        indexes = [
            models.Index(fields=['user', 'paid'], name='split_user_paid_idx'),
        ]

    def __str__(self):
        return f"{self.user.email}: {self.amount} ({'paid' if self.paid else 'unpaid'})"
