"""
Cache invalidation signals
Automatically invalidate cache when data changes
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from backend.parties.models import Customer
from backend.tailoring.models import Order
from .cache_utils import invalidate_dashboard_cache

logger = logging.getLogger(__name__)

# Thread-local storage to track signal suspension
_thread_locals = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Context manager to temporarily suspend cache invalidation signals.
    Useful for bulk imports. Remember to invalidate manually after the block!
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


@receiver([post_save, post_delete], sender=Customer)
def invalidate_on_customer_change(sender, instance, **kwargs):
    if is_suspended():
        return
    invalidate_dashboard_cache()


@receiver([post_save, post_delete], sender=Order)
def invalidate_on_order_change(sender, instance, **kwargs):
    if is_suspended():
        return
    invalidate_dashboard_cache()
