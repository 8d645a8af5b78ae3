"""
Tests for login, profile and user administration
"""
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken

from activity.models import ActivityLog
from stockpos.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import CustomUser
from .views import get_tokens_for_user

PASSWORD = 'Str0ng-pass-123'


class LoginTests(TestCase):
    """Test email/password login"""

    def setUp(self):
        self.client = APIClient()
        self.user = TestDataFactory.create_user(email='seller@shop.test', password=PASSWORD)

    def test_login_returns_profile_and_tokens(self):
        response = self.client.post('/auth/login/', {'email': 'seller@shop.test', 'password': PASSWORD})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['user']['email'], 'seller@shop.test')
        self.assertEqual(response.data['user']['role'], 'seller')
        self.assertIn('access', response.data['tokens'])
        self.assertIn('refresh', response.data['tokens'])

        self.user.refresh_from_db()
        self.assertIsNotNone(self.user.last_login)

    def test_login_email_is_case_insensitive(self):
        response = self.client.post('/auth/login/', {'email': 'Seller@Shop.TEST', 'password': PASSWORD})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_wrong_password_is_rejected(self):
        response = self.client.post('/auth/login/', {'email': 'seller@shop.test', 'password': 'nope'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        self.assertEqual(str(response.data['errors']['non_field_errors'][0]), 'Invalid email or password')

    def test_disabled_account_is_reported(self):
        self.user.is_active = False
        self.user.save()

        response = self.client.post('/auth/login/', {'email': 'seller@shop.test', 'password': PASSWORD})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(str(response.data['errors']['non_field_errors'][0]), 'User account is disabled')

    def test_logout_requires_refresh_token(self):
        client = AuthenticatedAPIClient().authenticate_user(self.user)
        response = client.post('/auth/logout/', {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logout_blacklists_refresh_token(self):
        tokens = get_tokens_for_user(self.user)
        client = AuthenticatedAPIClient().authenticate_user(self.user)

        response = client.post('/auth/logout/', {'refresh_token': tokens['refresh']})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post('/auth/token/refresh/', {'refresh': tokens['refresh']})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ProfileTests(TestCase):
    """Test the current user's profile and password"""

    def setUp(self):
        self.user = TestDataFactory.create_user(first_name='Awa', last_name='Diallo', password=PASSWORD)
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_profile_requires_authentication(self):
        response = APIClient().get('/auth/profile/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_profile(self):
        response = self.client.get('/auth/profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['full_name'], 'Awa Diallo')
        self.assertFalse(response.data['user']['is_admin'])

    def test_change_password(self):
        get_tokens_for_user(self.user)

        response = self.client.post('/auth/profile/password/', {
            'new_password': 'An0ther-secret-456',
            'new_password_confirm': 'An0ther-secret-456',
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('An0ther-secret-456'))
        self.assertEqual(
            BlacklistedToken.objects.filter(token__user=self.user).count(),
            OutstandingToken.objects.filter(user=self.user).count()
        )

    def test_change_password_confirmation_must_match(self):
        response = self.client.post('/auth/profile/password/', {
            'new_password': 'An0ther-secret-456',
            'new_password_confirm': 'Different-secret-789',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password(PASSWORD))

    def test_weak_password_is_rejected(self):
        response = self.client.post('/auth/profile/password/', {
            'new_password': '123',
            'new_password_confirm': '123',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class UserAdministrationTests(TestCase):
    """Test admin-only account management"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.seller = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_seller_cannot_list_users(self):
        client = AuthenticatedAPIClient().authenticate_user(self.seller)
        response = client.get('/auth/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_users(self):
        response = self.client.get('/auth/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)

    def test_create_user(self):
        response = self.client.post('/auth/users/new/', {
            'email': 'New.Seller@Shop.test',
            'password': PASSWORD,
            'first_name': 'Mamadou',
            'last_name': 'Bah',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        user = CustomUser.objects.get(email='new.seller@shop.test')
        self.assertEqual(user.username, 'new.seller@shop.test')
        self.assertEqual(user.role, CustomUser.ROLE_SELLER)
        self.assertTrue(ActivityLog.objects.filter(action='create_user', user=self.admin).exists())

    def test_create_user_rejects_duplicate_email(self):
        response = self.client.post('/auth/users/new/', {
            'email': self.seller.email.upper(),
            'password': PASSWORD,
            'first_name': 'Copy',
            'last_name': 'Cat',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data['errors'])

    def test_toggle_user_status_inverts_and_revokes(self):
        get_tokens_for_user(self.seller)

        response = self.client.post(f'/auth/users/{self.seller.id}/toggle-status/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.seller.refresh_from_db()
        self.assertFalse(self.seller.is_active)
        self.assertTrue(BlacklistedToken.objects.filter(token__user=self.seller).exists())

        log = ActivityLog.objects.get(action='toggle_user_status')
        self.assertEqual(log.details, {'target_user_id': self.seller.id, 'new_status': False})

    def test_toggle_user_status_explicit_action(self):
        response = self.client.post(f'/auth/users/{self.seller.id}/toggle-status/', {'action': 'enable'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.seller.refresh_from_db()
        self.assertTrue(self.seller.is_active)

    def test_admin_cannot_toggle_own_account(self):
        response = self.client.post(f'/auth/users/{self.admin.id}/toggle-status/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.admin.refresh_from_db()
        self.assertTrue(self.admin.is_active)

    def test_disabled_user_token_is_refused(self):
        client = AuthenticatedAPIClient().authenticate_user(self.seller)
        self.client.post(f'/auth/users/{self.seller.id}/toggle-status/', {'action': 'disable'})

        response = client.get('/auth/profile/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_delete_user(self):
        response = self.client.delete(f'/auth/users/{self.seller.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(CustomUser.objects.filter(id=self.seller.id).exists())
        self.assertTrue(ActivityLog.objects.filter(action='delete_user').exists())

    def test_admin_cannot_delete_own_account(self):
        response = self.client.delete(f'/auth/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(CustomUser.objects.filter(id=self.admin.id).exists())


class BootstrapAdminCommandTests(TestCase):

    def test_creates_admin(self):
        call_command(
            'bootstrap_admin', email='boss@shop.test', password=PASSWORD,
            first_name='Boss', last_name='Owner', stdout=StringIO()
        )
        user = CustomUser.objects.get(email='boss@shop.test')
        self.assertTrue(user.is_admin)
        self.assertTrue(user.check_password(PASSWORD))

    def test_promotes_existing_user(self):
        seller = TestDataFactory.create_user(email='promote@shop.test')
        call_command('bootstrap_admin', email='promote@shop.test', password=PASSWORD, stdout=StringIO())

        seller.refresh_from_db()
        self.assertTrue(seller.is_admin)
