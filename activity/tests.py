"""
Tests for the activity journal
"""
from unittest import mock

from django.contrib.auth.models import AnonymousUser
from django.db import DatabaseError, connection, transaction
from django.test import TestCase
from rest_framework import status

from stockpos.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import ActivityLog
from .utils import log_activity


class LogActivityTests(TestCase):

    def test_records_entry(self):
        user = TestDataFactory.create_user()
        log = log_activity(user, 'restock_product', {'product_id': 1, 'name': 'Rice', 'added': 5})

        self.assertEqual(log.user, user)
        self.assertEqual(log.summary, 'Product: Rice (+5)')
        self.assertEqual(log.action_label, 'Product Restocked')

    def test_anonymous_user_is_skipped(self):
        self.assertIsNone(log_activity(AnonymousUser(), 'checkout'))
        self.assertFalse(ActivityLog.objects.exists())

    def test_database_error_does_not_propagate(self):
        user = TestDataFactory.create_user()
        with mock.patch.object(ActivityLog.objects, 'create', side_effect=DatabaseError('down')):
            self.assertIsNone(log_activity(user, 'checkout'))

    def test_database_error_leaves_transaction_usable(self):
        user = TestDataFactory.create_user()

        def failing_create(**kwargs):
            with connection.cursor() as cursor:
                cursor.execute('SELECT * FROM activity_missing_table')

        with transaction.atomic():
            with mock.patch.object(ActivityLog.objects, 'create', side_effect=failing_create):
                self.assertIsNone(log_activity(user, 'checkout'))
            self.assertTrue(type(user).objects.filter(pk=user.pk).exists())


class SummaryTests(TestCase):

    def summary(self, action, details):
        return ActivityLog(action=action, details=details).summary

    def test_edit_product_diff(self):
        self.assertEqual(
            self.summary('edit_product', {'name': 'Rice', 'stock_diff': 4}),
            'Product: Rice (Diff: +4)'
        )
        self.assertEqual(
            self.summary('edit_product', {'name': 'Rice', 'stock_diff': -2}),
            'Product: Rice (Diff: -2)'
        )

    def test_toggle_user_status(self):
        self.assertEqual(
            self.summary('toggle_user_status', {'target_user_id': 7, 'new_status': False}),
            'User: 7 (Status: Disabled)'
        )

    def test_unknown_action_falls_back_to_json(self):
        self.assertEqual(self.summary('something_else', {'a': 1}), '{"a": 1}')

    def test_author_without_user(self):
        self.assertEqual(ActivityLog(action='checkout').author_name, 'System')


class ActivityJournalTests(TestCase):
    """Test the admin-only journal endpoint"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin(first_name='Kadiatou', last_name='Barry')
        self.seller = TestDataFactory.create_user(first_name='Sekou', last_name='Toure')
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

        for index in range(5):
            log_activity(self.seller, 'restock_product', {'name': f'P{index}', 'added': 1})
        log_activity(self.admin, 'delete_user', {'target_user_id': 99})
        log_activity(self.admin, 'create_category', {'name': 'Drinks'})

    def test_seller_is_forbidden(self):
        client = AuthenticatedAPIClient().authenticate_user(self.seller)
        response = client.get('/activity/logs/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_paginated_by_six(self):
        response = self.client.get('/activity/logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['count'], 7)
        self.assertEqual(len(response.data['logs']), 6)
        self.assertEqual(response.data['logs'][0]['action'], 'create_category')
        self.assertIn(
            {'value': 'checkout', 'label': 'Sale Checkout'}, response.data['actions']
        )

    def test_filter_by_action(self):
        response = self.client.get('/activity/logs/?action=delete_user')
        self.assertEqual(response.data['pagination']['count'], 1)
        self.assertEqual(response.data['logs'][0]['summary'], 'Target user: 99')

        response = self.client.get('/activity/logs/?action=all')
        self.assertEqual(response.data['pagination']['count'], 7)

    def test_search_by_author_name(self):
        response = self.client.get('/activity/logs/?search=sekou toure')
        self.assertEqual(response.data['pagination']['count'], 5)
        self.assertEqual(response.data['logs'][0]['author'], 'Sekou Toure')

    def test_search_by_action(self):
        response = self.client.get('/activity/logs/?search=category')
        self.assertEqual(response.data['pagination']['count'], 1)

    def test_page_out_of_range(self):
        response = self.client.get('/activity/logs/?page=5')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
