"""
Test suite for Tailoring module
Tests: Orders (payment rules, due amount, customer filter), Measurements
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase, SimpleTestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.tailoring.models import Order, Measurement, compute_due_amount, is_delivered


class OrderRuleTests(SimpleTestCase):
    """Test order helpers"""

    def test_due_amount(self):
        self.assertEqual(compute_due_amount(Decimal('1000'), Decimal('400')), Decimal('600'))

    def test_due_amount_never_negative(self):
        self.assertEqual(compute_due_amount(Decimal('100'), Decimal('150')), Decimal('0.00'))

    def test_delivered_is_case_insensitive(self):
        self.assertTrue(is_delivered('Delivered'))
        self.assertTrue(is_delivered(' delivered '))
        self.assertFalse(is_delivered('Ready'))
        self.assertFalse(is_delivered(None))


class OrderTests(TestCase):
    """Test order endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(name='Meera Joshi', phone='9811111111')

    def order_payload(self, **overrides):
        data = {
            'customer_id': self.customer.id,
            'dress_type': 'Blouse',
            'price': '1000.00',
            'paid_amount': '400.00',
            'delivery_date': '2024-06-15',
            'status': 'Pending',
        }
        data.update(overrides)
        return data

    def test_create_order(self):
        """Test creating an order returns due amount and customer details"""
        response = self.client.post('/orders', self.order_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_id'], self.customer.id)
        self.assertEqual(response.data['customer_name'], 'Meera Joshi')
        self.assertEqual(response.data['customer_phone'], '9811111111')
        self.assertEqual(response.data['due_amount'], Decimal('600.00'))

    def test_create_order_defaults(self):
        """Blank paid amount and status fall back to 0 and Pending"""
        payload = self.order_payload(paid_amount='', status='', trial_date='', payment_mode='')
        response = self.client.post('/orders', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get(id=response.data['id'])
        self.assertEqual(order.paid_amount, Decimal('0'))
        self.assertEqual(order.status, 'Pending')
        self.assertIsNone(order.trial_date)
        self.assertIsNone(order.payment_mode)

    def test_paid_amount_greater_than_price_rejected(self):
        response = self.client.post('/orders', self.order_payload(paid_amount='1500.00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cannot be greater than price', response.data['message'])
        self.assertEqual(Order.objects.count(), 0)

    def test_negative_paid_amount_rejected(self):
        response = self.client.post('/orders', self.order_payload(paid_amount='-1'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cannot be negative', response.data['message'])

    def test_unknown_customer_rejected(self):
        response = self.client.post('/orders', self.order_payload(customer_id=99999), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Add customer first', response.data['message'])

    def test_missing_delivery_date_rejected(self):
        payload = self.order_payload()
        del payload['delivery_date']
        response = self.client.post('/orders', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('delivery_date', response.data['errors'])

    def test_list_orders_filtered_by_customer(self):
        """?customer_id= limits the list to one customer"""
        other = TestDataFactory.create_customer()
        mine = TestDataFactory.create_order(customer=self.customer)
        TestDataFactory.create_order(customer=other)

        response = self.client.get(f'/orders?customer_id={self.customer.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([o['id'] for o in response.data], [mine.id])

        response = self.client.get('/orders')
        self.assertEqual(len(response.data), 2)

    def test_non_numeric_customer_filter_rejected(self):
        response = self.client.get('/orders?customer_id=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patch_paid_amount_checked_against_stored_price(self):
        """Partial updates still respect the stored price"""
        order = TestDataFactory.create_order(customer=self.customer, price=Decimal('500.00'))
        response = self.client.patch(f'/orders/{order.id}', {'paid_amount': '600.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch(f'/orders/{order.id}', {'paid_amount': '500.00', 'status': 'Delivered'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['due_amount'], Decimal('0.00'))

    def test_update_order(self):
        order = TestDataFactory.create_order(customer=self.customer)
        payload = self.order_payload(dress_type='Sherwani', price='5000.00', paid_amount='5000.00',
                                     payment_mode='UPI', payment_date='2024-06-10')
        response = self.client.put(f'/orders/{order.id}', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        order.refresh_from_db()
        self.assertEqual(order.dress_type, 'Sherwani')
        self.assertEqual(order.payment_date, date(2024, 6, 10))

    def test_put_resets_omitted_fields(self):
        """PUT replaces the order: omitted payment and status fields fall back to defaults"""
        order = TestDataFactory.create_order(
            customer=self.customer, price=Decimal('100.00'), paid_amount=Decimal('60.00'), status='Delivered',
            trial_date=date(2024, 1, 1), payment_mode='Cash', payment_date=date(2024, 1, 2)
        )
        payload = {
            'customer_id': self.customer.id,
            'dress_type': 'Shirt',
            'price': '100.00',
            'delivery_date': '2024-06-15',
        }
        response = self.client.put(f'/orders/{order.id}', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        order.refresh_from_db()
        self.assertEqual(order.paid_amount, Decimal('0.00'))
        self.assertEqual(order.status, 'Pending')
        self.assertIsNone(order.trial_date)
        self.assertIsNone(order.payment_mode)
        self.assertIsNone(order.payment_date)

    def test_patch_keeps_omitted_fields(self):
        order = TestDataFactory.create_order(
            customer=self.customer, paid_amount=Decimal('60.00'), status='Delivered', payment_mode='Cash'
        )
        response = self.client.patch(f'/orders/{order.id}', {'dress_type': 'Kurta'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        order.refresh_from_db()
        self.assertEqual(order.paid_amount, Decimal('60.00'))
        self.assertEqual(order.status, 'Delivered')
        self.assertEqual(order.payment_mode, 'Cash')

    def test_delete_order(self):
        order = TestDataFactory.create_order(customer=self.customer)
        response = self.client.delete(f'/orders/{order.id}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Order.objects.filter(id=order.id).exists())

    def test_get_missing_order(self):
        response = self.client.get('/orders/99999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class MeasurementTests(TestCase):
    """Test measurement endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(name='Kiran Rao')

    def test_create_measurement(self):
        data = {'customer_id': self.customer.id, 'chest': '40.5', 'waist': '34', 'shoulder': '18', 'length': '30'}
        response = self.client.post('/measurements', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_name'], 'Kiran Rao')
        self.assertEqual(Measurement.objects.get().chest, Decimal('40.50'))

    def test_non_numeric_measurement_rejected(self):
        data = {'customer_id': self.customer.id, 'chest': 'wide', 'waist': '34', 'shoulder': '18', 'length': '30'}
        response = self.client.post('/measurements', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('chest', response.data['errors'])

    def test_measurement_unknown_customer_rejected(self):
        data = {'customer_id': 99999, 'chest': '40', 'waist': '34', 'shoulder': '18', 'length': '30'}
        response = self.client.post('/measurements', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_measurements_for_customer(self):
        mine = TestDataFactory.create_measurement(customer=self.customer)
        TestDataFactory.create_measurement()
        response = self.client.get(f'/measurements?customer_id={self.customer.id}')
        self.assertEqual([m['id'] for m in response.data], [mine.id])

    def test_patch_measurement(self):
        measurement = TestDataFactory.create_measurement(customer=self.customer)
        response = self.client.patch(f'/measurements/{measurement.id}', {'waist': '36'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        measurement.refresh_from_db()
        self.assertEqual(measurement.waist, Decimal('36.00'))

    def test_delete_measurement(self):
        measurement = TestDataFactory.create_measurement(customer=self.customer)
        response = self.client.delete(f'/measurements/{measurement.id}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
