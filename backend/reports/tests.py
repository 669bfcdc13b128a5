"""
Test suite for Reports module
Tests: Dashboard metrics, 7-day collection series, dashboard caching
"""
from datetime import date
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase, SimpleTestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.reports.services import dashboard_metrics, daily_collections
from backend.tailoring.models import Order

TODAY = date(2024, 5, 15)


def make_order(order_id, price, paid_amount, status='Pending', payment_date=None, created_at='2024-05-10T10:00:00+05:30'):
    return {
        'id': order_id,
        'price': price,
        'paid_amount': paid_amount,
        'status': status,
        'payment_date': payment_date,
        'created_at': created_at,
    }


class DashboardMetricsTests(SimpleTestCase):
    """Test dashboard rollups"""

    def setUp(self):
        self.orders = [
            make_order(1, '1000', '400', status='Delivered', payment_date='2024-05-15'),
            make_order(2, '500', '500', created_at='2024-05-14T19:00:00+05:30'),
            make_order(3, '300', '100', status='DELIVERED', payment_date='2024-05-01'),
        ]
        self.customers = [{'id': 1}, {'id': 2}]

    def test_totals(self):
        metrics = dashboard_metrics(self.orders, self.customers, today=TODAY)
        self.assertEqual(metrics['total_bills'], 3)
        self.assertEqual(metrics['total_amount'], Decimal('1800'))
        self.assertEqual(metrics['total_received'], Decimal('1000'))
        self.assertEqual(metrics['total_due'], Decimal('800'))
        self.assertEqual(metrics['delivered_bills'], 2)
        self.assertEqual(metrics['pending_bills'], 1)
        self.assertEqual(metrics['total_customers'], 2)

    def test_today_collections_use_payment_date(self):
        metrics = dashboard_metrics(self.orders, self.customers, today=TODAY)
        self.assertEqual(metrics['today_collections'], Decimal('400'))

    def test_daily_collections_window(self):
        series = daily_collections(self.orders, today=TODAY)
        self.assertEqual(len(series), 7)
        self.assertEqual(series[0]['date'], '2024-05-09')
        self.assertEqual(series[-1]['date'], '2024-05-15')
        by_day = {point['date']: point['amount'] for point in series}
        self.assertEqual(by_day['2024-05-15'], Decimal('400'))
        # No payment date, so the creation day counts
        self.assertEqual(by_day['2024-05-14'], Decimal('500'))
        self.assertEqual(by_day['2024-05-10'], Decimal('0'))

    def test_recent_bills_limited_to_eight(self):
        orders = [make_order(i, '100', '0') for i in range(1, 11)]
        metrics = dashboard_metrics(orders, [], today=TODAY)
        self.assertEqual([o['id'] for o in metrics['recent_bills']], [10, 9, 8, 7, 6, 5, 4, 3])

    def test_empty(self):
        metrics = dashboard_metrics([], [], today=TODAY)
        self.assertEqual(metrics['total_bills'], 0)
        self.assertEqual(metrics['recent_bills'], [])
        self.assertTrue(all(point['amount'] == 0 for point in metrics['daily_collections']))


class DashboardEndpointTests(TestCase):
    """Test the dashboard endpoint"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer()
        self.order = TestDataFactory.create_order(
            customer=self.customer,
            price=Decimal('1000.00'),
            paid_amount=Decimal('250.00'),
            payment_date=timezone.localdate(),
        )

    def test_dashboard(self):
        response = self.client.get('/reports/dashboard')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_bills'], 1)
        self.assertEqual(response.data['total_amount'], 1000.0)
        self.assertEqual(response.data['total_due'], 750.0)
        self.assertEqual(response.data['today_collections'], 250.0)
        self.assertEqual(response.data['total_customers'], 1)
        self.assertEqual(response.data['recent_bills'][0]['id'], self.order.id)
        self.assertEqual(len(response.data['daily_collections']), 7)
        self.assertEqual(response.data['daily_collections'][-1],
                         {'date': timezone.localdate().isoformat(), 'amount': 250.0})

    def test_dashboard_is_cached_until_data_changes(self):
        self.client.get('/reports/dashboard')

        # Queryset updates bypass model signals, so the cached copy is served
        Order.objects.filter(pk=self.order.pk).update(price=Decimal('2000.00'))
        response = self.client.get('/reports/dashboard')
        self.assertEqual(response.data['total_amount'], 1000.0)

        TestDataFactory.create_order(customer=self.customer, price=Decimal('500.00'))
        response = self.client.get('/reports/dashboard')
        self.assertEqual(response.data['total_bills'], 2)
        self.assertEqual(response.data['total_amount'], 2500.0)

    def test_requires_token(self):
        self.client.logout()
        response = self.client.get('/reports/dashboard')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
