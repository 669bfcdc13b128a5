"""
Dashboard rollups computed from the full order and customer lists
"""
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from backend.billing.services import to_decimal, to_date_only
from backend.tailoring.models import is_delivered, compute_due_amount

RECENT_BILLS_LIMIT = 8
COLLECTION_WINDOW_DAYS = 7


def collection_date(order):
    """Day a payment counts towards: payment date, falling back to creation date"""
    return to_date_only(order.get('payment_date')) or to_date_only(order.get('created_at'))


def _order_id(order):
    try:
        return int(order.get('id') or 0)
    except (TypeError, ValueError):
        return 0


def daily_collections(orders, today=None, days=COLLECTION_WINDOW_DAYS):
    """
    Collections per calendar day over the trailing window ending today.

    Always returns `days` entries, oldest first; days without payments are 0.
    """
    today = today or timezone.localdate()
    labels = [(today - timedelta(days=offset)).isoformat() for offset in range(days - 1, -1, -1)]
    totals = {label: Decimal('0') for label in labels}

    for order in orders:
        key = collection_date(order)
        if key in totals:
            totals[key] += to_decimal(order.get('paid_amount'))

    return [{'date': label, 'amount': totals[label]} for label in labels]


def dashboard_metrics(orders, customers, today=None):
    today = today or timezone.localdate()
    today_key = today.isoformat()

    total_amount = sum((to_decimal(o.get('price')) for o in orders), Decimal('0'))
    total_received = sum((to_decimal(o.get('paid_amount')) for o in orders), Decimal('0'))
    total_due = sum(
        (compute_due_amount(to_decimal(o.get('price')), to_decimal(o.get('paid_amount'))) for o in orders),
        Decimal('0')
    )
    delivered_bills = sum(1 for o in orders if is_delivered(o.get('status')))
    today_collections = sum(
        (to_decimal(o.get('paid_amount')) for o in orders if collection_date(o) == today_key),
        Decimal('0')
    )
    recent_bills = sorted(orders, key=_order_id, reverse=True)[:RECENT_BILLS_LIMIT]

    return {
        'total_bills': len(orders),
        'total_amount': total_amount,
        'total_received': total_received,
        'total_due': total_due,
        'delivered_bills': delivered_bills,
        'pending_bills': len(orders) - delivered_bills,
        'today_collections': today_collections,
        'total_customers': len(customers),
        'recent_bills': recent_bills,
        'daily_collections': daily_collections(orders, today),
    }
