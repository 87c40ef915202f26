"""
Account lifecycle signals.

Sent after the surrounding transaction commits with a single
``deletion_request`` keyword argument.
"""
from django.dispatch import Signal

deletion_requested = Signal()
account_recovered = Signal()
deletion_cancelled = Signal()
