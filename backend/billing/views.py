import logging

from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import JSONRenderer, StaticHTMLRenderer
from rest_framework.response import Response

from backend.parties.models import Customer
from backend.parties.serializers import CustomerSerializer
from backend.tailoring.models import Order
from backend.tailoring.serializers import OrderSerializer
from .models import BillingSettings
from .serializers import BillingSettingsSerializer
from . import services

logger = logging.getLogger(__name__)


def _money(value):
    return float(round(value, 2))


def _billing_settings_data():
    return BillingSettingsSerializer(BillingSettings.load()).data


def _filtered_orders(request):
    """Orders matching ?filter=&from=&to= plus the parameters used"""
    period = request.query_params.get('filter', services.FILTER_ALL)
    date_from = request.query_params.get('from', None)
    date_to = request.query_params.get('to', None)

    orders = OrderSerializer(Order.objects.select_related('customer').order_by('-id'), many=True).data
    try:
        filtered = services.filter_orders(orders, period, date_from, date_to)
    except ValueError as e:
        raise ValidationError({'filter': str(e)})
    return filtered, period, date_from, date_to


def _invoice_mode(request):
    mode = request.query_params.get('mode', services.MODE_PRINT)
    if mode not in services.MODES:
        raise ValidationError({'mode': f"mode must be one of: {', '.join(services.MODES)}"})
    return mode


def _html_response(html):
    return HttpResponse(html, content_type='text/html; charset=utf-8')


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def billing_settings(request):
    """Get or update the shop's invoice branding and tax settings"""
    settings_obj = BillingSettings.load()

    if request.method == 'GET':
        return Response(BillingSettingsSerializer(settings_obj).data)

    serializer = BillingSettingsSerializer(settings_obj, data=request.data, partial=request.method == 'PATCH')
    serializer.is_valid(raise_exception=True)
    serializer.save()
    logger.info(f"Billing settings updated by {request.user.username}")
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def billing_summary(request):
    """Billing totals and per-bill lines for a date filter"""
    filtered, period, date_from, date_to = _filtered_orders(request)
    billing = _billing_settings_data()
    customers = CustomerSerializer(Customer.objects.all(), many=True).data

    summary = services.summarize(filtered, billing)
    bills = services.bill_rows(filtered, customers, billing)

    return Response({
        'filter': period,
        'period': {
            'from': date_from,
            'to': date_to,
        },
        'summary': {
            'total_bills': summary['total_bills'],
            'subtotal': _money(summary['subtotal']),
            'total_received': _money(summary['total_received']),
            'total_outstanding': _money(summary['total_outstanding']),
            'tax_amount': _money(summary['tax_amount']),
            'cgst_amount': _money(summary['cgst_amount']),
            'sgst_amount': _money(summary['sgst_amount']),
            'total_amount': _money(summary['total_amount']),
            'delivered': summary['delivered'],
            'pending': summary['pending'],
        },
        'bills': [
            {
                **row,
                'total_amount': _money(row['total_amount']),
                'paid_amount': _money(row['paid_amount']),
                'due_amount': _money(row['due_amount']),
            }
            for row in bills
        ],
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@renderer_classes([JSONRenderer, StaticHTMLRenderer])
def invoice_detail(request, order_id):
    """Printable invoice for one order"""
    mode = _invoice_mode(request)
    order = get_object_or_404(Order.objects.select_related('customer'), pk=order_id)

    html = services.render_invoices(
        [OrderSerializer(order).data],
        [CustomerSerializer(order.customer).data],
        _billing_settings_data(),
        mode,
    )
    return _html_response(html)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@renderer_classes([JSONRenderer, StaticHTMLRenderer])
def invoice_batch(request):
    """Every filtered bill in one printable document"""
    mode = _invoice_mode(request)
    filtered, _, _, _ = _filtered_orders(request)
    if not filtered:
        return Response({'message': 'No filtered bills to print.'}, status=status.HTTP_400_BAD_REQUEST)

    customers = CustomerSerializer(Customer.objects.all(), many=True).data
    html = services.render_invoices(filtered, customers, _billing_settings_data(), mode)
    return _html_response(html)
