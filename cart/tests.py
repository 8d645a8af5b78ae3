"""
Tests for the till cart and checkout
"""
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from rest_framework import status

from activity.models import ActivityLog
from inventory.models import StockMovement
from sales.models import Sale
from sales.signals import sale_completed
from stockpos.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Cart, CartItem


class CartTests(TestCase):
    """Test adding, updating and removing cart lines"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Rice', quantity=5, unit_price=Decimal('3000'))

    def add(self, product, quantity=1):
        return self.client.post('/cart/add/', {'product_id': product.id, 'quantity': quantity})

    def test_add_to_cart(self):
        response = self.add(self.product, 2)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['cart']['total_items'], 2)
        self.assertEqual(Decimal(response.data['cart']['total_price']), Decimal('6000'))

    def test_adding_twice_increments(self):
        self.add(self.product, 2)
        self.add(self.product, 1)
        self.assertEqual(CartItem.objects.get(product=self.product).quantity, 3)

    def test_add_over_stock_is_rejected(self):
        self.add(self.product, 4)
        response = self.add(self.product, 2)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Insufficient stock')
        self.assertEqual(CartItem.objects.get(product=self.product).quantity, 4)

    def test_add_archived_product_is_rejected(self):
        archived = TestDataFactory.create_product(quantity=5, is_archived=True)
        response = self.add(archived)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_add_unknown_product(self):
        response = self.client.post('/cart/add/', {'product_id': 9999})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_with_absolute_quantity(self):
        self.add(self.product)
        response = self.client.put(f'/cart/update/{self.product.id}/', {'quantity': 4})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(CartItem.objects.get(product=self.product).quantity, 4)

    def test_update_with_delta_is_clamped_to_one(self):
        self.add(self.product, 2)
        self.client.put(f'/cart/update/{self.product.id}/', {'delta': -5})
        self.assertEqual(CartItem.objects.get(product=self.product).quantity, 1)

    def test_update_over_stock(self):
        self.add(self.product, 5)
        response = self.client.put(f'/cart/update/{self.product.id}/', {'delta': 1})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Maximum stock reached')

    def test_update_line_of_archived_product(self):
        self.add(self.product, 3)
        self.product.is_archived = True
        self.product.save()

        response = self.client.put(f'/cart/update/{self.product.id}/', {'delta': -1})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Product is archived')
        self.assertEqual(CartItem.objects.get(product=self.product).quantity, 3)

    def test_update_requires_quantity_or_delta(self):
        self.add(self.product)
        response = self.client.put(f'/cart/update/{self.product.id}/', {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_product_not_in_cart(self):
        response = self.client.put(f'/cart/update/{self.product.id}/', {'quantity': 1})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_remove_and_clear(self):
        other = TestDataFactory.create_product(quantity=5)
        self.add(self.product)
        self.add(other)

        response = self.client.delete(f'/cart/remove/{self.product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['cart']['total_items'], 1)

        response = self.client.delete('/cart/clear/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(Cart.objects.get(user=self.user).is_empty)

    def test_count(self):
        self.add(self.product, 3)
        response = self.client.get('/cart/count/')
        self.assertEqual(response.data['count'], 3)

    def test_info_creates_empty_cart(self):
        response = self.client.get('/cart/info/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['cart']['is_empty'])


class CheckoutTests(TestCase):
    """Test turning a cart into a sale"""

    def setUp(self):
        self.user = TestDataFactory.create_user(first_name='Ibrahima', last_name='Sow')
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        self.rice = TestDataFactory.create_product(name='Rice', quantity=10, unit_price=Decimal('3000'))
        self.oil = TestDataFactory.create_product(name='Oil', quantity=4, unit_price=Decimal('15000'))

    def fill_cart(self):
        self.client.post('/cart/add/', {'product_id': self.rice.id, 'quantity': 3})
        self.client.post('/cart/add/', {'product_id': self.oil.id, 'quantity': 1})

    def test_empty_cart_is_rejected(self):
        response = self.client.post('/cart/checkout/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cart is empty')

    def test_checkout_creates_sale_and_moves_stock(self):
        self.fill_cart()

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post('/cart/checkout/')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        sale = Sale.objects.get()
        self.assertEqual(sale.seller, self.user)
        self.assertEqual(sale.seller_name, 'Ibrahima Sow')
        self.assertEqual(sale.total_amount, Decimal('24000'))
        self.assertEqual(sale.item_count, 4)
        self.assertTrue(sale.reference.startswith('VNT-'))
        self.assertEqual(response.data['sale']['reference'], sale.reference)

        self.rice.refresh_from_db()
        self.oil.refresh_from_db()
        self.assertEqual(self.rice.quantity, 7)
        self.assertEqual(self.oil.quantity, 3)

        sale_movements = StockMovement.objects.filter(reason='sale')
        self.assertEqual(sale_movements.count(), 2)
        self.assertTrue(all(m.type == StockMovement.TYPE_OUT for m in sale_movements))

        self.assertTrue(Cart.objects.get(user=self.user).is_empty)

        log = ActivityLog.objects.get(action='checkout')
        self.assertEqual(log.details['reference'], sale.reference)
        self.assertEqual(log.details['item_count'], 4)

    def test_sale_lines_keep_price_at_sale_time(self):
        self.fill_cart()
        self.client.post('/cart/checkout/')

        self.rice.unit_price = Decimal('3500')
        self.rice.save()

        line = Sale.objects.get().lines.get(product=self.rice)
        self.assertEqual(line.unit_price, Decimal('3000'))
        self.assertEqual(line.product_name, 'Rice')

    def test_checkout_rejects_unavailable_products(self):
        self.fill_cart()
        self.oil.apply_movement(StockMovement.TYPE_OUT, 4, 'adjustment')

        response = self.client.post('/cart/checkout/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['unavailable_items'], ['Oil'])

        self.assertFalse(Sale.objects.exists())
        self.rice.refresh_from_db()
        self.assertEqual(self.rice.quantity, 10)

    def test_checkout_sends_sale_completed_after_commit(self):
        self.fill_cart()
        handler = mock.Mock()
        sale_completed.connect(handler, weak=False)
        self.addCleanup(sale_completed.disconnect, handler)

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            self.client.post('/cart/checkout/')

        self.assertEqual(len(callbacks), 1)
        handler.assert_called_once()
        self.assertEqual(handler.call_args.kwargs['sale'], Sale.objects.get())
