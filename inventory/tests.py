"""
Tests for the product catalog, stock movements and the audit journal
"""
from decimal import Decimal

from django.contrib import admin
from django.core.exceptions import ValidationError
from django.test import RequestFactory, TestCase, override_settings
from rest_framework import status

from activity.models import ActivityLog
from stockpos.test_utils import TestDataFactory, AuthenticatedAPIClient
from .admin import ProductAdmin
from .models import Product, StockMovement


class ProductModelTests(TestCase):
    """Test derived stock values and apply_movement"""

    def test_stock_status(self):
        product = TestDataFactory.create_product(quantity=0, min_threshold=5)
        self.assertEqual(product.stock_status, Product.STATUS_OUT)
        self.assertTrue(product.is_out_of_stock)
        self.assertFalse(product.is_low_stock)

        product.quantity = 5
        self.assertEqual(product.stock_status, Product.STATUS_CRITICAL)
        self.assertTrue(product.is_low_stock)

        product.quantity = 6
        self.assertEqual(product.stock_status, Product.STATUS_IN_STOCK)
        self.assertFalse(product.is_critical)

    def test_stock_value(self):
        product = TestDataFactory.create_product(quantity=4, unit_price=Decimal('2500'))
        self.assertEqual(product.stock_value, Decimal('10000'))

    def test_sku_is_generated(self):
        product = TestDataFactory.create_product()
        self.assertTrue(product.sku.startswith('PRD-'))
        self.assertEqual(len(product.sku), 12)

    def test_apply_movement_records_movement(self):
        product = TestDataFactory.create_product(quantity=10)
        movement = product.apply_movement(StockMovement.TYPE_OUT, 3, 'sale')

        product.refresh_from_db()
        self.assertEqual(product.quantity, 7)
        self.assertEqual(movement.signed_quantity, -3)
        self.assertEqual(movement.author_name, 'System')

    def test_out_movement_cannot_exceed_stock(self):
        product = TestDataFactory.create_product(quantity=2)
        with self.assertRaises(ValidationError):
            product.apply_movement(StockMovement.TYPE_OUT, 3, 'sale')

        product.refresh_from_db()
        self.assertEqual(product.quantity, 2)

    def test_movement_quantity_must_be_positive(self):
        product = TestDataFactory.create_product(quantity=2)
        with self.assertRaises(ValidationError):
            product.apply_movement(StockMovement.TYPE_IN, 0, 'restock')


class ProductListTests(TestCase):
    """Test the inventory table filters"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        self.category = TestDataFactory.create_category(name='Drinks')

        self.rice = TestDataFactory.create_product(name='Rice 25kg', quantity=50, sku='RICE-25')
        self.juice = TestDataFactory.create_product(name='Mango juice', quantity=3, category=self.category)
        self.oil = TestDataFactory.create_product(name='Palm oil', quantity=0)
        self.old = TestDataFactory.create_product(name='Old soap', quantity=8, is_archived=True)

    def names(self, response):
        return [p['name'] for p in response.data['products']]

    def test_list_hides_archived_and_orders_by_name(self):
        response = self.client.get('/inventory/list/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.names(response), ['Mango juice', 'Palm oil', 'Rice 25kg'])
        self.assertEqual(response.data['count'], 3)

    def test_include_archived(self):
        response = self.client.get('/inventory/list/?include_archived=true')
        self.assertIn('Old soap', self.names(response))

    def test_search_matches_name_or_sku(self):
        self.assertEqual(self.names(self.client.get('/inventory/list/?search=mango')), ['Mango juice'])
        self.assertEqual(self.names(self.client.get('/inventory/list/?search=rice-25')), ['Rice 25kg'])

    def test_stock_filter(self):
        self.assertEqual(self.names(self.client.get('/inventory/list/?stock=low')), ['Mango juice'])
        self.assertEqual(self.names(self.client.get('/inventory/list/?stock=out')), ['Palm oil'])

    def test_invalid_stock_filter(self):
        response = self.client.get('/inventory/list/?stock=plenty')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_category_filter(self):
        response = self.client.get(f'/inventory/list/?category={self.category.id}')
        self.assertEqual(self.names(response), ['Mango juice'])

    def test_available_products(self):
        response = self.client.get('/inventory/available/')
        self.assertEqual(self.names(response), ['Mango juice', 'Rice 25kg'])


class ProductMutationTests(TestCase):
    """Test product creation, edits, restocks, archiving and deletion"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_create_product_records_initial_stock(self):
        response = self.client.post('/inventory/new/', {
            'name': 'Sugar 1kg',
            'unit_price': '12000',
            'quantity': 20,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        product = Product.objects.get(name='Sugar 1kg')
        self.assertEqual(product.quantity, 20)
        self.assertEqual(product.min_threshold, 5)

        movement = product.stock_movements.get()
        self.assertEqual(movement.type, StockMovement.TYPE_IN)
        self.assertEqual(movement.reason, 'initial_stock')
        self.assertEqual(movement.created_by, self.user)
        self.assertTrue(ActivityLog.objects.filter(action='create_product').exists())

    @override_settings(DEFAULT_MIN_THRESHOLD=12)
    def test_default_threshold_comes_from_settings(self):
        self.client.post('/inventory/new/', {'name': 'Salt', 'unit_price': '500'})
        self.assertEqual(Product.objects.get(name='Salt').min_threshold, 12)

    def test_create_product_rejects_negative_values(self):
        response = self.client.post('/inventory/new/', {
            'name': 'Bad', 'unit_price': '-1', 'quantity': -4,
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('unit_price', response.data['errors'])
        self.assertIn('quantity', response.data['errors'])

    def test_update_quantity_records_adjustment(self):
        product = TestDataFactory.create_product(quantity=10)

        response = self.client.patch(f'/inventory/update/{product.id}/', {'quantity': 7})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        adjustment = product.stock_movements.get(reason='adjustment')
        self.assertEqual(adjustment.type, StockMovement.TYPE_OUT)
        self.assertEqual(adjustment.quantity, 3)

        log = ActivityLog.objects.get(action='edit_product')
        self.assertEqual(log.details['stock_diff'], -3)

    def test_get_product(self):
        product = TestDataFactory.create_product(name='Tea')
        response = self.client.get(f'/inventory/update/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['product']['name'], 'Tea')

    def test_unknown_product_gives_404(self):
        response = self.client.get('/inventory/update/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_restock(self):
        product = TestDataFactory.create_product(quantity=2)

        response = self.client.patch(f'/inventory/restock/{product.id}/', {'quantity_to_add': 8})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['product']['quantity'], 10)

        movement = product.stock_movements.get(reason='restock')
        self.assertEqual(movement.quantity, 8)
        self.assertEqual(ActivityLog.objects.get(action='restock_product').details['added'], 8)

    def test_restock_requires_positive_quantity(self):
        product = TestDataFactory.create_product(quantity=2)
        response = self.client.patch(f'/inventory/restock/{product.id}/', {'quantity_to_add': 0})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_archive_toggles(self):
        product = TestDataFactory.create_product()

        self.client.post(f'/inventory/archive/{product.id}/')
        product.refresh_from_db()
        self.assertTrue(product.is_archived)

        self.client.post(f'/inventory/archive/{product.id}/')
        product.refresh_from_db()
        self.assertFalse(product.is_archived)

        actions = list(ActivityLog.objects.order_by('id').values_list('action', flat=True))
        self.assertEqual(actions, ['archive_product', 'unarchive_product'])

    def test_delete_requires_admin(self):
        product = TestDataFactory.create_product()
        response = self.client.delete(f'/inventory/delete/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_deletes_product(self):
        product = TestDataFactory.create_product()
        admin = TestDataFactory.create_admin()
        client = AuthenticatedAPIClient().authenticate_user(admin)

        response = client.delete(f'/inventory/delete/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Product.objects.filter(id=product.id).exists())
        self.assertTrue(ActivityLog.objects.filter(action='delete_product', user=admin).exists())


class ProductAdminTests(TestCase):
    """Test that stock edited from the Django admin is journaled"""

    def setUp(self):
        self.admin_user = TestDataFactory.create_admin()
        self.request = RequestFactory().post('/admin/inventory/product/')
        self.request.user = self.admin_user
        self.model_admin = ProductAdmin(Product, admin.site)

    def test_quantity_change_records_adjustment(self):
        product = TestDataFactory.create_product(quantity=10)
        product.quantity = 4
        self.model_admin.save_model(self.request, product, None, True)

        product.refresh_from_db()
        self.assertEqual(product.quantity, 4)
        adjustment = product.stock_movements.get(reason='adjustment')
        self.assertEqual(adjustment.type, StockMovement.TYPE_OUT)
        self.assertEqual(adjustment.quantity, 6)
        self.assertEqual(adjustment.created_by, self.admin_user)

    def test_other_fields_do_not_record_movement(self):
        product = TestDataFactory.create_product(quantity=10)
        product.unit_price = Decimal('2500')
        self.model_admin.save_model(self.request, product, None, True)

        product.refresh_from_db()
        self.assertEqual(product.unit_price, Decimal('2500'))
        self.assertEqual(product.stock_movements.count(), 1)

    def test_new_product_records_initial_stock(self):
        product = Product(name='Sugar', quantity=12, unit_price=Decimal('800'))
        self.model_admin.save_model(self.request, product, None, False)

        product.refresh_from_db()
        self.assertEqual(product.quantity, 12)
        movement = product.stock_movements.get()
        self.assertEqual(movement.reason, 'initial_stock')
        self.assertEqual(movement.quantity, 12)


class CategoryTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())

    def test_create_category_generates_slug(self):
        response = self.client.post('/inventory/category/new/', {'name': 'Cold Drinks'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['category']['slug'], 'cold-drinks')

    def test_duplicate_category_is_rejected(self):
        TestDataFactory.create_category(name='Snacks')
        response = self.client.post('/inventory/category/new/', {'name': 'Snacks'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_categories(self):
        TestDataFactory.create_category(name='Snacks')
        response = self.client.get('/inventory/categories/')
        self.assertEqual([c['name'] for c in response.data['categories']], ['Snacks'])


class MovementJournalTests(TestCase):
    """Test per-product history and the audit journal"""

    def setUp(self):
        self.user = TestDataFactory.create_user(first_name='Fanta', last_name='Camara')
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_product_history(self):
        product = TestDataFactory.create_product(quantity=5, user=self.user)
        product.apply_movement(StockMovement.TYPE_OUT, 2, 'sale', self.user)

        response = self.client.get(f'/inventory/stock-movements/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['current_stock'], 3)
        self.assertEqual(len(response.data['stock_movements']), 2)

    def test_journal_is_paginated_by_five(self):
        product = TestDataFactory.create_product(quantity=20, user=self.user)
        for _ in range(6):
            product.apply_movement(StockMovement.TYPE_OUT, 1, 'sale', self.user)

        response = self.client.get('/inventory/movements/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['count'], 7)
        self.assertEqual(response.data['pagination']['total_pages'], 2)
        self.assertEqual(len(response.data['movements']), 5)
        self.assertEqual(response.data['movements'][0]['author'], 'Fanta Camara')
        self.assertEqual(response.data['authors'], [{'id': self.user.id, 'name': 'Fanta Camara'}])

    def test_journal_author_filter(self):
        other = TestDataFactory.create_user()
        TestDataFactory.create_product(quantity=5, user=self.user)
        TestDataFactory.create_product(quantity=5, user=other)
        TestDataFactory.create_product(quantity=5)

        response = self.client.get(f'/inventory/movements/?author={other.id}')
        self.assertEqual(response.data['pagination']['count'], 1)
        self.assertIn({'id': 'system', 'name': 'System'}, response.data['authors'])
        self.assertIn({'id': other.id, 'name': other.display_name}, response.data['authors'])

        response = self.client.get('/inventory/movements/?author=system')
        self.assertEqual(response.data['pagination']['count'], 1)
        self.assertEqual(response.data['movements'][0]['author'], 'System')

    def test_journal_page_out_of_range(self):
        response = self.client.get('/inventory/movements/?page=9')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_journal_row_value(self):
        TestDataFactory.create_product(quantity=3, unit_price=Decimal('1500'), user=self.user)
        row = self.client.get('/inventory/movements/').data['movements'][0]
        self.assertEqual(Decimal(row['value']), Decimal('4500'))
