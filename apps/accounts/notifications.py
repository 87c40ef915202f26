"""
Email notices for the account deletion lifecycle.

Delivery is fire-and-forget: a failing mail backend is logged and never
breaks the request that triggered the notice.
"""
import logging

from django.conf import settings
from django.core.mail import send_mail
from django.dispatch import receiver

from .signals import deletion_requested, account_recovered, deletion_cancelled

logger = logging.getLogger(__name__)


def _notify(user, subject, body):
    try:
        send_mail(
            subject=subject,
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
        )
    except Exception:
        logger.warning("Could not send '%s' notice to user %s", subject, user.id, exc_info=True)


@receiver(deletion_requested)
def notify_deletion_requested(sender, deletion_request, **kwargs):
    user = deletion_request.user
    _notify(
        user,
        'Your account is scheduled for deletion',
        f"Hi {user.get_display_name()},\n\n"
        f"Your account will be deleted on "
        f"{deletion_request.scheduled_deletion_at:%Y-%m-%d %H:%M} UTC. "
        f"Log in and recover it before then to keep your data.",
    )


@receiver(account_recovered)
def notify_account_recovered(sender, deletion_request, **kwargs):
    user = deletion_request.user
    _notify(
        user,
        'Your account has been recovered',
        f"Hi {user.get_display_name()},\n\nYour account is active again.",
    )


@receiver(deletion_cancelled)
def notify_deletion_cancelled(sender, deletion_request, **kwargs):
    user = deletion_request.user
    _notify(
        user,
        'Account deletion cancelled',
        f"Hi {user.get_display_name()},\n\nThe scheduled deletion of your account was cancelled.",
    )
