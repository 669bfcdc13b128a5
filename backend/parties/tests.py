"""
Test suite for Parties module
Tests: Customer CRUD, search, validation, protected delete
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.parties.models import Customer


class CustomerTests(TestCase):
    """Test customer endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_customer(self):
        """Test creating a customer"""
        data = {'name': 'Ravi Kumar', 'phone': '9876543210', 'address': '12 MG Road, Pune'}
        response = self.client.post('/customers', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Ravi Kumar')
        self.assertIn('id', response.data)
        self.assertTrue(Customer.objects.filter(phone='9876543210').exists())

    def test_create_customer_missing_field(self):
        """Missing address is a validation error naming the field"""
        response = self.client.post('/customers', {'name': 'Ravi', 'phone': '9876543210'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['message'].startswith('address'))
        self.assertIn('address', response.data['errors'])

    def test_list_customers_newest_first(self):
        """Test listing customers in descending id order"""
        first = TestDataFactory.create_customer()
        second = TestDataFactory.create_customer()
        response = self.client.get('/customers')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['id'] for c in response.data], [second.id, first.id])

    def test_search_customers(self):
        """Search matches name or phone"""
        TestDataFactory.create_customer(name='Sunita Patil', phone='9000000001')
        TestDataFactory.create_customer(name='Amit Shah', phone='9000000002')
        response = self.client.get('/customers?search=sunita')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/customers?search=0002')
        self.assertEqual(response.data[0]['name'], 'Amit Shah')

    def test_get_customer(self):
        customer = TestDataFactory.create_customer()
        response = self.client.get(f'/customers/{customer.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['phone'], customer.phone)

    def test_get_missing_customer(self):
        response = self.client.get('/customers/99999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('message', response.data)

    def test_update_customer(self):
        """PUT replaces all fields"""
        customer = TestDataFactory.create_customer()
        data = {'name': 'Updated Name', 'phone': '9111111111', 'address': 'New Address'}
        response = self.client.put(f'/customers/{customer.id}', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        customer.refresh_from_db()
        self.assertEqual(customer.name, 'Updated Name')

    def test_partial_update_customer(self):
        """PATCH touches only the given fields"""
        customer = TestDataFactory.create_customer(address='Old Address')
        response = self.client.patch(f'/customers/{customer.id}', {'phone': '9222222222'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        customer.refresh_from_db()
        self.assertEqual(customer.phone, '9222222222')
        self.assertEqual(customer.address, 'Old Address')

    def test_delete_customer(self):
        customer = TestDataFactory.create_customer()
        response = self.client.delete(f'/customers/{customer.id}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Customer.objects.filter(id=customer.id).exists())

    def test_delete_customer_with_orders_refused(self):
        """Customers with orders cannot be deleted"""
        customer = TestDataFactory.create_customer()
        TestDataFactory.create_order(customer=customer)
        response = self.client.delete(f'/customers/{customer.id}')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Customer has orders or measurements. Delete them first.')
        self.assertTrue(Customer.objects.filter(id=customer.id).exists())

    def test_delete_customer_with_measurements_refused(self):
        customer = TestDataFactory.create_customer()
        TestDataFactory.create_measurement(customer=customer)
        response = self.client.delete(f'/customers/{customer.id}')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
