"""
Test suite for Core module
Tests: Login, legacy password upgrade, token checks, health/readiness, bootstrap, error shaping
"""
from datetime import timedelta
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.db.models import ProtectedError
from django.test import TestCase, SimpleTestCase, override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.tokens import AccessToken
from backend.core.models import User
from backend.core.exceptions import api_exception_handler, first_error_message
from backend.core.cache_signals import suspend_cache_signals
from backend.core.cache_utils import dashboard_cache_key
from backend.core.utils import ensure_default_admin
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class LoginTests(TestCase):
    """Test the login endpoint"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_login_success(self):
        """Valid credentials return a token and the principal"""
        user = TestDataFactory.create_user(username='owner', password='Secret@123')
        response = self.client.post('/auth/login', {'username': 'owner', 'password': 'Secret@123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertTrue(response.data['token'])
        self.assertEqual(response.data['user'], {'id': user.id, 'username': 'owner', 'role': 'admin'})

    def test_login_username_is_trimmed(self):
        """Surrounding whitespace in the username is ignored"""
        TestDataFactory.create_user(username='owner', password='Secret@123')
        response = self.client.post('/auth/login', {'username': '  owner ', 'password': 'Secret@123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_login_missing_fields(self):
        """Missing username or password is a 400"""
        response = self.client.post('/auth/login', {'username': 'owner'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['message'], 'Username and password are required')

    def test_login_wrong_password(self):
        """Wrong password is a 401"""
        TestDataFactory.create_user(username='owner', password='Secret@123')
        response = self.client.post('/auth/login', {'username': 'owner', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Invalid username or password')

    def test_login_unknown_user(self):
        """Unknown username is a 401 with the same message"""
        response = self.client.post('/auth/login', {'username': 'ghost', 'password': 'whatever'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Invalid username or password')

    def test_login_inactive_user(self):
        """Inactive users cannot log in"""
        user = TestDataFactory.create_user(username='former', password='Secret@123')
        user.is_active = False
        user.save()
        response = self.client.post('/auth/login', {'username': 'former', 'password': 'Secret@123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class LegacyPasswordUpgradeTests(TestCase):
    """Test the plaintext-to-hash upgrade on first login"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.user = TestDataFactory.create_legacy_user(username='oldadmin', plaintext_password='legacy123')

    def test_legacy_login_upgrades_password(self):
        """A plaintext match logs in, stores a hash and clears the plaintext"""
        response = self.client.post('/auth/login', {'username': 'oldadmin', 'password': 'legacy123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.user.refresh_from_db()
        self.assertTrue(self.user.password)
        self.assertIsNone(self.user.legacy_password)
        self.assertTrue(self.user.check_password('legacy123'))

    def test_second_login_uses_hash(self):
        """After the upgrade the same password keeps working"""
        self.client.post('/auth/login', {'username': 'oldadmin', 'password': 'legacy123'}, format='json')
        response = self.client.post('/auth/login', {'username': 'oldadmin', 'password': 'legacy123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_legacy_wrong_password_keeps_plaintext(self):
        """A failed plaintext match changes nothing"""
        response = self.client.post('/auth/login', {'username': 'oldadmin', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        self.user.refresh_from_db()
        self.assertEqual(self.user.password, '')
        self.assertEqual(self.user.legacy_password, 'legacy123')

    def test_inactive_legacy_account_not_upgraded(self):
        """A refused login leaves an inactive account's plaintext in place"""
        self.user.is_active = False
        self.user.save()
        response = self.client.post('/auth/login', {'username': 'oldadmin', 'password': 'legacy123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        self.user.refresh_from_db()
        self.assertEqual(self.user.password, '')
        self.assertEqual(self.user.legacy_password, 'legacy123')

    def test_hash_takes_precedence_over_plaintext(self):
        """When a hash exists the plaintext column is ignored"""
        self.user.set_password('hashed456')
        self.user.save()
        response = self.client.post('/auth/login', {'username': 'oldadmin', 'password': 'legacy123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class TokenTests(TestCase):
    """Test bearer token handling on protected endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='owner')
        self.client = AuthenticatedAPIClient()

    def test_missing_token(self):
        """Protected endpoints reject requests without a token"""
        response = self.client.get('/customers')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('message', response.data)

    def test_invalid_token(self):
        """Protected endpoints reject garbage tokens"""
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-real-token')
        response = self.client.get('/customers')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_expired_token(self):
        """Protected endpoints reject expired tokens"""
        token = AccessToken.for_user(self.user)
        token.set_exp(lifetime=-timedelta(minutes=1))
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/customers')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        """The token identifies the principal"""
        self.client.authenticate_user(self.user)
        response = self.client.get('/auth/me')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'owner')
        self.assertEqual(response.data['role'], 'admin')

    def test_refresh(self):
        """A refresh token yields a new access token"""
        TestDataFactory.create_user(username='refresher', password='Secret@123')
        login = self.client.post('/auth/login', {'username': 'refresher', 'password': 'Secret@123'}, format='json')
        response = self.client.post('/auth/refresh', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)


class ServiceEndpointTests(TestCase):
    """Test public service endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_service_info(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'ok': True, 'service': 'karanjkar-tailors-backend'})

    def test_health(self):
        """Health check pings the database"""
        response = self.client.get('/health')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'ok': True})

    @override_settings(DEFAULT_ADMIN_USERNAME='admin')
    def test_ready_without_admin(self):
        """Readiness fails until the default admin is seeded"""
        response = self.client.get('/auth/ready')
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertFalse(response.data['success'])

    @override_settings(DEFAULT_ADMIN_USERNAME='admin')
    def test_ready_with_admin(self):
        TestDataFactory.create_user(username='admin')
        response = self.client.get('/auth/ready')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True})


@override_settings(DEFAULT_ADMIN_USERNAME='admin', DEFAULT_ADMIN_PASSWORD='Admin@123')
class BootstrapTests(TestCase):
    """Test default admin seeding"""

    def test_ensure_default_admin_creates_once(self):
        user, created = ensure_default_admin()
        self.assertTrue(created)
        self.assertEqual(user.role, 'admin')
        self.assertTrue(user.check_password('Admin@123'))

        again, created = ensure_default_admin()
        self.assertFalse(created)
        self.assertEqual(again.id, user.id)
        self.assertEqual(User.objects.filter(username='admin').count(), 1)

    def test_existing_legacy_admin_left_untouched(self):
        """Seeding never overwrites an existing account"""
        TestDataFactory.create_legacy_user(username='admin', plaintext_password='old-secret')
        user, created = ensure_default_admin()
        self.assertFalse(created)
        self.assertEqual(user.legacy_password, 'old-secret')

    def test_bootstrap_command(self):
        out = StringIO()
        call_command('bootstrap', '--skip-migrate', stdout=out)
        self.assertIn('Created default admin "admin"', out.getvalue())

        out = StringIO()
        call_command('bootstrap', '--skip-migrate', stdout=out)
        self.assertIn('already exists', out.getvalue())

    def test_bootstrap_command_custom_credentials(self):
        call_command('bootstrap', '--skip-migrate', '--username', 'owner', '--password', 'Shop@2024', stdout=StringIO())
        user = User.objects.get(username='owner')
        self.assertTrue(user.check_password('Shop@2024'))

    def test_seeded_admin_can_log_in(self):
        call_command('bootstrap', '--skip-migrate', stdout=StringIO())
        client = AuthenticatedAPIClient()
        response = client.post('/auth/login', {'username': 'admin', 'password': 'Admin@123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class ExceptionHandlerTests(SimpleTestCase):
    """Test error response shaping"""

    def test_first_error_message_names_field(self):
        self.assertEqual(first_error_message({'name': ['This field is required.']}), 'name: This field is required.')

    def test_first_error_message_non_field(self):
        self.assertEqual(first_error_message({'non_field_errors': ['Bad combination']}), 'Bad combination')

    def test_validation_error_shape(self):
        response = api_exception_handler(ValidationError({'phone': ['This field is required.']}), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'phone: This field is required.')
        self.assertEqual(response.data['errors'], {'phone': ['This field is required.']})

    def test_protected_error_is_bad_request(self):
        response = api_exception_handler(ProtectedError('still referenced', set()), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('message', response.data)

    def test_unhandled_error_is_server_error(self):
        with self.assertLogs('backend.core.exceptions', level='ERROR'):
            response = api_exception_handler(RuntimeError('connection lost'), {})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'message': 'Server error', 'error': 'connection lost'})


class DashboardCacheInvalidationTests(TestCase):
    """Test that customer/order writes drop the cached dashboard"""

    def setUp(self):
        cache.clear()
        self.key = dashboard_cache_key(timezone.localdate())

    def test_customer_save_invalidates(self):
        cache.set(self.key, {'total_customers': 0})
        TestDataFactory.create_customer()
        self.assertIsNone(cache.get(self.key))

    def test_order_delete_invalidates(self):
        order = TestDataFactory.create_order()
        cache.set(self.key, {'total_bills': 1})
        order.delete()
        self.assertIsNone(cache.get(self.key))

    def test_suspended_signals_keep_cache(self):
        cache.set(self.key, {'total_customers': 0})
        with suspend_cache_signals():
            TestDataFactory.create_customer()
        self.assertIsNotNone(cache.get(self.key))
