"""
Test suite for Billing module
Tests: Date filters, tax split, summary, invoice numbering/rendering, settings and billing endpoints
"""
from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase, SimpleTestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.billing import services
from backend.billing.models import BillingSettings

# A Wednesday
TODAY = date(2024, 5, 15)


def make_order(order_id, created_at, price='1000', paid_amount='0', status='Pending', **extra):
    order = {
        'id': order_id,
        'customer_id': 1,
        'customer_name': 'Asha Deshmukh',
        'customer_phone': '9822222222',
        'dress_type': 'Kurta',
        'price': price,
        'paid_amount': paid_amount,
        'status': status,
        'created_at': created_at,
        'delivery_date': '2024-06-01',
    }
    order.update(extra)
    return order


class FilterOrdersTests(SimpleTestCase):
    """Test billing date filters"""

    def setUp(self):
        self.orders = [
            make_order(1, '2024-05-12T10:00:00+05:30'),  # previous Sunday
            make_order(2, '2024-05-13T09:00:00+05:30'),  # Monday
            make_order(3, '2024-05-15T18:30:00+05:30'),  # today
            make_order(4, '2024-05-19T20:00:00+05:30'),  # Sunday
            make_order(5, '2024-05-20T08:00:00+05:30'),  # next Monday
            make_order(6, '2024-04-30T08:00:00+05:30'),
        ]

    def ids(self, period, date_from=None, date_to=None):
        filtered = services.filter_orders(self.orders, period, date_from, date_to, today=TODAY)
        return [o['id'] for o in filtered]

    def test_all(self):
        self.assertEqual(self.ids('All'), [1, 2, 3, 4, 5, 6])

    def test_today(self):
        self.assertEqual(self.ids('Today'), [3])

    def test_this_week_is_monday_to_sunday(self):
        self.assertEqual(self.ids('This Week'), [2, 3, 4])

    def test_this_month(self):
        self.assertEqual(self.ids('This Month'), [1, 2, 3, 4, 5])

    def test_custom_range_is_inclusive(self):
        self.assertEqual(self.ids('Custom', '2024-05-13', '2024-05-15'), [2, 3])

    def test_custom_without_both_bounds_keeps_everything(self):
        self.assertEqual(self.ids('Custom', '2024-05-13', None), [1, 2, 3, 4, 5, 6])

    def test_falls_back_to_delivery_date(self):
        orders = [make_order(9, None, delivery_date='2024-05-15')]
        filtered = services.filter_orders(orders, 'Today', today=TODAY)
        self.assertEqual(len(filtered), 1)

    def test_orders_without_dates_dropped(self):
        orders = [make_order(9, None, delivery_date=None)]
        self.assertEqual(services.filter_orders(orders, 'All', today=TODAY), [])

    def test_unknown_filter(self):
        with self.assertRaises(ValueError):
            services.filter_orders(self.orders, 'Yesterday', today=TODAY)


class BillingMathTests(SimpleTestCase):
    """Test tax split, summary totals and formatting"""

    def test_tax_breakdown(self):
        tax = services.tax_breakdown(Decimal('1000'), {'apply_tax': True, 'tax_percent': Decimal('5')})
        self.assertEqual(tax['tax_amount'], Decimal('50'))
        self.assertEqual(tax['cgst_amount'], Decimal('25'))
        self.assertEqual(tax['sgst_amount'], Decimal('25'))
        self.assertEqual(tax['total_amount'], Decimal('1050'))

    def test_tax_disabled(self):
        tax = services.tax_breakdown(Decimal('1000'), {'apply_tax': False, 'tax_percent': Decimal('5')})
        self.assertEqual(tax['tax_amount'], Decimal('0'))
        self.assertEqual(tax['total_amount'], Decimal('1000'))

    def test_summarize(self):
        orders = [
            make_order(1, '2024-05-15', price='1000', paid_amount='400', status='Delivered'),
            make_order(2, '2024-05-15', price='500', paid_amount='500', status='delivered'),
            make_order(3, '2024-05-15', price='300', paid_amount='0', status='Ready'),
        ]
        summary = services.summarize(orders, {'apply_tax': True, 'tax_percent': '5'})
        self.assertEqual(summary['total_bills'], 3)
        self.assertEqual(summary['subtotal'], Decimal('1800'))
        self.assertEqual(summary['total_received'], Decimal('900'))
        self.assertEqual(summary['total_outstanding'], Decimal('900'))
        self.assertEqual(summary['tax_amount'], Decimal('90'))
        self.assertEqual(summary['total_amount'], Decimal('1890'))
        self.assertEqual(summary['delivered'], 2)
        self.assertEqual(summary['pending'], 1)

    def test_summarize_empty(self):
        summary = services.summarize([])
        self.assertEqual(summary['total_bills'], 0)
        self.assertEqual(summary['total_amount'], Decimal('0'))

    def test_format_currency_indian_grouping(self):
        self.assertEqual(services.format_currency(Decimal('123456.5')), '₹1,23,456.50')
        self.assertEqual(services.format_currency('999'), '₹999.00')
        self.assertEqual(services.format_currency(Decimal('10000000')), '₹1,00,00,000.00')


class InvoiceTests(SimpleTestCase):
    """Test invoice numbering and HTML rendering"""

    def test_invoice_number(self):
        order = make_order(7, '2024-03-02T10:00:00+05:30')
        self.assertEqual(services.invoice_number(order, 'KT', today=TODAY), 'KT-2024-0007')

    def test_invoice_number_defaults(self):
        order = make_order(12, None, delivery_date=None)
        self.assertEqual(services.invoice_number(order, '', today=TODAY), 'KT-2024-0012')

    def test_render_contains_tax_rows(self):
        html = services.render_invoices(
            [make_order(7, '2024-03-02', price='1000')], [], {'apply_tax': True, 'tax_percent': '5'}, today=TODAY
        )
        self.assertIn('KT-2024-0007', html)
        self.assertIn('CGST (2.5%)', html)
        self.assertIn('₹1,050.00', html)
        self.assertNotIn('Save as PDF', html)

    def test_render_without_tax(self):
        html = services.render_invoices(
            [make_order(7, '2024-03-02', price='1000')], [], {'apply_tax': False}, today=TODAY
        )
        self.assertNotIn('CGST', html)
        self.assertIn('₹1,000.00', html)

    def test_pdf_mode_adds_hint(self):
        html = services.render_invoices([make_order(7, '2024-03-02')], [], mode='pdf', today=TODAY)
        self.assertIn('Save as PDF', html)

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            services.render_invoices([make_order(7, '2024-03-02')], [], mode='docx')

    def test_user_text_is_escaped(self):
        order = make_order(7, '2024-03-02', customer_name='<script>alert(1)</script>')
        html = services.render_invoices([order], [], {'shop_name': 'A & B Tailors'}, today=TODAY)
        self.assertNotIn('<script>', html)
        self.assertIn('&lt;script&gt;', html)
        self.assertIn('A &amp; B Tailors', html)

    def test_one_section_per_order(self):
        orders = [make_order(1, '2024-03-02'), make_order(2, '2024-03-03')]
        html = services.render_invoices(orders, [], today=TODAY)
        self.assertEqual(html.count('<section class="invoice">'), 2)

    def test_logo_data_url_preferred(self):
        billing = {'logo_url': '/logo.png', 'logo_data_url': 'data:image/png;base64,AAAA'}
        invoice = services.build_invoice(make_order(1, '2024-03-02'), {}, billing)
        self.assertEqual(invoice['logo_src'], 'data:image/png;base64,AAAA')

    def test_customer_lookup_used_for_phone(self):
        order = make_order(1, '2024-03-02', customer_id=5, customer_phone=None)
        customers = services.customer_index([{'id': 5, 'name': 'Lata', 'phone': '9833333333'}])
        invoice = services.build_invoice(order, customers)
        self.assertEqual(invoice['customer_phone'], '9833333333')


class BillingSettingsTests(TestCase):
    """Test billing settings endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_get_defaults(self):
        response = self.client.get('/billing/settings')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['shop_name'], 'Karanjkar Tailors')
        self.assertEqual(response.data['invoice_prefix'], 'KT')
        self.assertTrue(response.data['apply_tax'])

    def test_patch_settings(self):
        response = self.client.patch('/billing/settings', {'invoice_prefix': ' kb ', 'apply_tax': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        settings_obj = BillingSettings.load()
        self.assertEqual(settings_obj.invoice_prefix, 'KB')
        self.assertFalse(settings_obj.apply_tax)

    def test_tax_percent_out_of_range(self):
        response = self.client.patch('/billing/settings', {'tax_percent': '150'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logo_data_url_clears_logo_url(self):
        response = self.client.patch(
            '/billing/settings', {'logo_data_url': 'data:image/png;base64,AAAA'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['logo_url'], '')

    def test_non_image_data_url_rejected(self):
        response = self.client.patch('/billing/settings', {'logo_data_url': 'javascript:alert(1)'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class BillingEndpointTests(TestCase):
    """Test billing summary and invoice endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(name='Pooja Kulkarni', phone='9844444444')
        self.order = TestDataFactory.create_order(
            customer=self.customer, price=Decimal('1000.00'), paid_amount=Decimal('400.00'), status='Delivered'
        )

    def test_summary_all(self):
        response = self.client.get('/billing/summary')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['filter'], 'All')
        summary = response.data['summary']
        self.assertEqual(summary['total_bills'], 1)
        self.assertEqual(summary['subtotal'], 1000.0)
        self.assertEqual(summary['tax_amount'], 50.0)
        self.assertEqual(summary['total_amount'], 1050.0)
        self.assertEqual(summary['total_outstanding'], 600.0)
        self.assertEqual(summary['delivered'], 1)
        bill = response.data['bills'][0]
        self.assertEqual(bill['customer_name'], 'Pooja Kulkarni')
        self.assertEqual(bill['due_amount'], 600.0)

    def test_summary_today(self):
        response = self.client.get('/billing/summary?filter=Today')
        self.assertEqual(response.data['summary']['total_bills'], 1)

    def test_summary_custom_range(self):
        today = timezone.localdate()
        date_from = (today - timedelta(days=1)).isoformat()
        date_to = (today + timedelta(days=1)).isoformat()
        response = self.client.get(f'/billing/summary?filter=Custom&from={date_from}&to={date_to}')
        self.assertEqual(response.data['summary']['total_bills'], 1)
        self.assertEqual(response.data['period'], {'from': date_from, 'to': date_to})

        response = self.client.get('/billing/summary?filter=Custom&from=2000-01-01&to=2000-01-31')
        self.assertEqual(response.data['summary']['total_bills'], 0)

    def test_summary_unknown_filter(self):
        response = self.client.get('/billing/summary?filter=Yesterday')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invoice_detail(self):
        response = self.client.get(f'/billing/invoices/{self.order.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response['Content-Type'].startswith('text/html'))
        html = response.content.decode()
        self.assertIn('Pooja Kulkarni', html)
        self.assertIn(f'KT-{timezone.localdate().year}-{self.order.id:04d}', html)

    def test_invoice_detail_pdf_mode(self):
        response = self.client.get(f'/billing/invoices/{self.order.id}?mode=pdf')
        self.assertIn('Save as PDF', response.content.decode())

    def test_invoice_detail_bad_mode(self):
        response = self.client.get(f'/billing/invoices/{self.order.id}?mode=docx')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invoice_missing_order(self):
        response = self.client.get('/billing/invoices/99999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_invoice_batch(self):
        TestDataFactory.create_order(customer=self.customer)
        response = self.client.get('/billing/invoices?filter=Today')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.content.decode().count('<section class="invoice">'), 2)

    def test_invoice_batch_empty(self):
        response = self.client.get('/billing/invoices?filter=Custom&from=2000-01-01&to=2000-01-31')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'No filtered bills to print.')

    def test_requires_token(self):
        self.client.logout()
        response = self.client.get('/billing/summary')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
