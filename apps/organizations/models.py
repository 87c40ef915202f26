# ==========================================
# apps/organizations/models.py
# ==========================================

from django.conf import settings
from django.db import models
import uuid
import secrets


class OrganizationRole(models.TextChoices):
    OWNER = 'owner', 'Owner'
    ADMIN = 'admin', 'Admin'
    MEMBER = 'member', 'Member'
    COOK = 'cook', 'Cook'


# Roles that take part in shared expenses
SPLIT_ELIGIBLE_ROLES = [OrganizationRole.OWNER, OrganizationRole.ADMIN, OrganizationRole.MEMBER]


def generate_invite_code():
    return secrets.token_urlsafe(12)[:16]


def default_currency():
    return settings.DEFAULT_CURRENCY


class Organization(models.Model):
    """A shared household (tenant) whose members split expenses."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    invite_code = models.CharField(max_length=16, unique=True, db_index=True, editable=False)
    owner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='owned_organizations')
    currency = models.CharField(max_length=3, default=default_currency)
    # New advance payments start as pending and wait for an admin review
    advance_payment_review_required = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'organizations'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='org_owner_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.invite_code:
            self.invite_code = generate_invite_code()
        super().save(*args, **kwargs)

    def has_member(self, user):
        return self.memberships.filter(user=user).exists()

    def get_user_role(self, user):
        try:
            return self.memberships.get(user=user).role
        except OrganizationMembership.DoesNotExist:
            return None

    def is_admin(self, user):
        role = self.get_user_role(user)
        return role in [OrganizationRole.OWNER, OrganizationRole.ADMIN]


class OrganizationMembership(models.Model):
    """User membership in an organization with role."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='organization_memberships')
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=20, choices=OrganizationRole.choices, default=OrganizationRole.MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'organization_memberships'
        unique_together = [['user', 'organization']]
        indexes = [
            models.Index(fields=['organization', 'role'], name='org_member_role_idx'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.organization.name} ({self.role})"

    def save(self, *args, **kwargs):
        if self.organization.owner_id == self.user_id:
            self.role = OrganizationRole.OWNER
        super().save(*args, **kwargs)
