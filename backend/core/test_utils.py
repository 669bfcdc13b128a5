"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.parties.models import Customer
from backend.tailoring.models import Order, Measurement
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, password='testpass123', role='admin', is_staff=False, is_superuser=False):
        """Create a test user with a hashed password"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        return User.objects.create_user(
            username=username,
            password=password,
            role=role,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_legacy_user(username=None, plaintext_password='legacy123'):
        """Create a user record that only has a plaintext password (no hash yet)"""
        if not username:
            username = f'legacy_{TestDataFactory.random_string(6)}'
        return User.objects.create(
            username=username,
            password='',
            legacy_password=plaintext_password,
            role='admin'
        )

    @staticmethod
    def create_customer(name=None, phone=None, address=None):
        """Create a test customer"""
        if not name:
            name = f'Customer_{TestDataFactory.random_string(6)}'
        if not phone:
            phone = f'9{random.randint(100000000, 999999999)}'
        return Customer.objects.create(
            name=name,
            phone=phone,
            address=address or f'Test Address {name}'
        )

    @staticmethod
    def create_order(customer=None, dress_type='Shirt', price=None, paid_amount=None, status='Pending',
                     delivery_date=None, created_at=None, **kwargs):
        """
        Create a test order

        created_at is auto-set on insert, so an explicit value is written
        with a follow-up update.
        """
        if not customer:
            customer = TestDataFactory.create_customer()
        order = Order.objects.create(
            customer=customer,
            dress_type=dress_type,
            price=price if price is not None else Decimal('1000.00'),
            paid_amount=paid_amount if paid_amount is not None else Decimal('0.00'),
            status=status,
            delivery_date=delivery_date or timezone.localdate(),
            **kwargs
        )
        if created_at is not None:
            Order.objects.filter(pk=order.pk).update(created_at=created_at)
            order.refresh_from_db()
        return order

    @staticmethod
    def create_measurement(customer=None, chest='40.00', waist='34.00', shoulder='18.00', length='30.00'):
        """Create a test measurement"""
        if not customer:
            customer = TestDataFactory.create_customer()
        return Measurement.objects.create(
            customer=customer,
            chest=Decimal(chest),
            waist=Decimal(waist),
            shoulder=Decimal(shoulder),
            length=Decimal(length)
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
