import logging
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.utils import timezone

from backend.core.cache_utils import get_cached_dashboard_kpis, cache_dashboard_kpis
from backend.parties.models import Customer
from backend.tailoring.models import Order
from backend.tailoring.serializers import OrderSerializer
from .services import dashboard_metrics

logger = logging.getLogger('backend.reports')


def _money(value):
    return float(round(value, 2))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Dashboard KPIs, recent bills and the trailing 7-day collection series"""
    today = timezone.localdate()
    cached_data, cache_key = get_cached_dashboard_kpis(today)
    if cached_data is not None:
        return Response(cached_data)

    orders = OrderSerializer(Order.objects.select_related('customer').order_by('-id'), many=True).data
    customers = list(Customer.objects.values('id'))
    metrics = dashboard_metrics(orders, customers, today)

    response_data = {
        'date': today.isoformat(),
        'total_bills': metrics['total_bills'],
        'total_amount': _money(metrics['total_amount']),
        'total_received': _money(metrics['total_received']),
        'total_due': _money(metrics['total_due']),
        'delivered_bills': metrics['delivered_bills'],
        'pending_bills': metrics['pending_bills'],
        'today_collections': _money(metrics['today_collections']),
        'total_customers': metrics['total_customers'],
        'recent_bills': metrics['recent_bills'],
        'daily_collections': [
            {'date': point['date'], 'amount': _money(point['amount'])}
            for point in metrics['daily_collections']
        ],
    }
    cache_dashboard_kpis(cache_key, response_data)
    logger.debug(f"Dashboard computed for {today.isoformat()}: {metrics['total_bills']} bills")
    return Response(response_data)
