"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.utils.text import slugify
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from inventory.models import Category, Product, StockMovement
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_lowercase + string.digits, k=length))

    @staticmethod
    def create_user(email=None, password='Str0ng-pass-123', role=User.ROLE_SELLER,
                    first_name='Test', last_name=None, is_active=True):
        """Create a test user (the email doubles as the username)"""
        if not email:
            email = f'user_{TestDataFactory.random_string(6)}@test.com'
        return User.objects.create_user(
            username=email,
            email=email,
            password=password,
            role=role,
            first_name=first_name,
            last_name=last_name if last_name is not None else TestDataFactory.random_string(5).title(),
            is_active=is_active
        )

    @staticmethod
    def create_admin(**kwargs):
        kwargs.setdefault('first_name', 'Admin')
        return TestDataFactory.create_user(role=User.ROLE_ADMIN, **kwargs)

    @staticmethod
    def create_category(name=None, description=None):
        """Create a test category"""
        if not name:
            name = f'Category {TestDataFactory.random_string(6)}'
        return Category.objects.create(
            name=name,
            slug=slugify(name),
            description=description or f'Test category {name}'
        )

    @staticmethod
    def create_product(name=None, quantity=10, unit_price=Decimal('1000'), min_threshold=5,
                       category=None, sku=None, is_archived=False, user=None):
        """
        Create a test product. Its stock goes through an 'initial_stock'
        movement like products created through the API.
        """
        if not name:
            name = f'Product {TestDataFactory.random_string(6)}'
        product = Product.objects.create(
            name=name,
            sku=sku,
            category=category,
            quantity=0,
            unit_price=unit_price,
            min_threshold=min_threshold,
            is_archived=is_archived
        )
        if quantity:
            product.apply_movement(StockMovement.TYPE_IN, quantity, 'initial_stock', user)
        return product


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
