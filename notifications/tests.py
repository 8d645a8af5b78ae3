"""
Tests for notifications and the signals that create them
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from inventory.models import StockMovement
from stockpos.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Notification
from .utils import create_notification, notify_admins


class NotifyAdminsTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.other_admin = TestDataFactory.create_admin()
        self.disabled_admin = TestDataFactory.create_admin(is_active=False)
        self.seller = TestDataFactory.create_user()

    def test_only_active_admins(self):
        sent = notify_admins('Hello', 'Message', Notification.TYPE_INFO)

        self.assertEqual(sent, 2)
        self.assertEqual(
            set(Notification.objects.values_list('user_id', flat=True)),
            {self.admin.id, self.other_admin.id}
        )

    def test_exclude(self):
        notify_admins('Hello', 'Message', exclude=self.admin)
        self.assertEqual(list(Notification.objects.values_list('user_id', flat=True)), [self.other_admin.id])


class LowStockSignalTests(TestCase):
    """Test the alert fired when stock crosses the threshold"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.product = TestDataFactory.create_product(name='Rice', quantity=8, min_threshold=5)

    def alerts(self):
        return Notification.objects.filter(type=Notification.TYPE_LOW_STOCK)

    def test_crossing_threshold_alerts_admins(self):
        self.product.apply_movement(StockMovement.TYPE_OUT, 3, 'sale')

        alert = self.alerts().get()
        self.assertEqual(alert.user, self.admin)
        self.assertIn('Rice', alert.message)

    def test_staying_above_threshold(self):
        self.product.apply_movement(StockMovement.TYPE_OUT, 2, 'sale')
        self.assertFalse(self.alerts().exists())

    def test_already_below_threshold_does_not_repeat(self):
        self.product.apply_movement(StockMovement.TYPE_OUT, 4, 'sale')
        self.product.apply_movement(StockMovement.TYPE_OUT, 1, 'sale')
        self.assertEqual(self.alerts().count(), 1)

    def test_out_of_stock_message(self):
        self.product.apply_movement(StockMovement.TYPE_OUT, 8, 'sale')
        self.assertIn('out of stock', self.alerts().get().message)


class SaleNotificationTests(TestCase):

    def test_checkout_notifies_other_admins(self):
        admin = TestDataFactory.create_admin()
        seller_admin = TestDataFactory.create_admin(first_name='Alpha', last_name='Conde')
        product = TestDataFactory.create_product(quantity=50, unit_price=Decimal('2500'))

        client = AuthenticatedAPIClient().authenticate_user(seller_admin)
        client.post('/cart/add/', {'product_id': product.id, 'quantity': 2})

        with self.captureOnCommitCallbacks(execute=True):
            client.post('/cart/checkout/')

        notes = Notification.objects.filter(type=Notification.TYPE_SALE)
        self.assertEqual(notes.count(), 1)
        self.assertEqual(notes.get().user, admin)
        self.assertIn('Alpha Conde', notes.get().message)
        self.assertIn('5,000 FG', notes.get().message)


class NotificationViewTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_list_latest_twenty_with_unread_count(self):
        for index in range(22):
            create_notification(self.user, f'Note {index}', 'Body')
        Notification.objects.filter(title='Note 0').update(is_read=True)

        response = self.client.get('/notifications/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['notifications']), 20)
        self.assertEqual(response.data['notifications'][0]['title'], 'Note 21')
        self.assertEqual(response.data['unread_count'], 21)

    def test_mark_read(self):
        note = create_notification(self.user, 'Hi', 'Body')

        response = self.client.post(f'/notifications/{note.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        note.refresh_from_db()
        self.assertTrue(note.is_read)

    def test_cannot_mark_someone_elses(self):
        note = create_notification(TestDataFactory.create_user(), 'Hi', 'Body')

        response = self.client.post(f'/notifications/{note.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        note.refresh_from_db()
        self.assertFalse(note.is_read)

    def test_mark_all_read(self):
        for _ in range(3):
            create_notification(self.user, 'Hi', 'Body')
        create_notification(TestDataFactory.create_user(), 'Other', 'Body')

        response = self.client.post('/notifications/read-all/')
        self.assertEqual(response.data['updated'], 3)
        self.assertEqual(Notification.objects.filter(is_read=False).count(), 1)
