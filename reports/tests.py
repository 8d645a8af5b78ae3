"""
Tests for the dashboard, stock synthesis and exports
"""
from datetime import date, timedelta
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status

from inventory.models import StockMovement
from sales.models import Sale, SaleLine
from stockpos.test_utils import TestDataFactory, AuthenticatedAPIClient
from .exports import format_amount, render_table
from .synthesis import DateRangeError, build_synthesis, parse_date_range


class FormatAmountTests(SimpleTestCase):

    def test_whole_amounts_drop_decimals(self):
        self.assertEqual(format_amount(Decimal('1250000')), '1,250,000')

    def test_fractional_amounts(self):
        self.assertEqual(format_amount(Decimal('1234.5')), '1,234.50')

    def test_none_is_zero(self):
        self.assertEqual(format_amount(None), '0')

    def test_unknown_export_format(self):
        with self.assertRaises(ValueError):
            render_table('csv', 'Title', ['A'], [])


class SynthesisTests(SimpleTestCase):
    """Test the grouping pass over movement rows"""

    def row(self, product_id, name, type, quantity, unit_price='1000'):
        return {
            'product_id': product_id,
            'product_name': name,
            'unit_price': Decimal(unit_price),
            'type': type,
            'quantity': quantity,
        }

    def test_groups_and_totals(self):
        products, totals = build_synthesis([
            self.row(2, 'Soap', 'in', 10, '500'),
            self.row(1, 'Rice', 'in', 20, '3000'),
            self.row(1, 'Rice', 'out', 5, '3000'),
            self.row(2, 'Soap', 'out', 4, '500'),
            self.row(1, 'Rice', 'out', 3, '3000'),
        ])

        self.assertEqual([p['product_name'] for p in products], ['Rice', 'Soap'])

        rice = products[0]
        self.assertEqual(rice['total_in'], 20)
        self.assertEqual(rice['total_out'], 8)
        self.assertEqual(rice['net'], 12)
        self.assertEqual(rice['movement_count'], 3)
        self.assertEqual(rice['value_out'], Decimal('24000'))

        self.assertEqual(totals['total_in'], 30)
        self.assertEqual(totals['total_out'], 12)
        self.assertEqual(totals['net'], 18)
        self.assertEqual(totals['movement_count'], 5)
        self.assertEqual(totals['value_out'], Decimal('26000'))
        self.assertEqual(totals['product_count'], 2)

    def test_empty(self):
        products, totals = build_synthesis([])
        self.assertEqual(products, [])
        self.assertEqual(totals['net'], 0)

    def test_parse_date_range(self):
        self.assertEqual(
            parse_date_range('2024-01-01', '2024-01-31'),
            (date(2024, 1, 1), date(2024, 1, 31))
        )
        self.assertEqual(parse_date_range('', None), (None, None))

    def test_invalid_dates(self):
        for bad in ('2024-13-01', '01/02/2024', 'today'):
            with self.assertRaises(DateRangeError):
                parse_date_range(bad, None)

    def test_inverted_range(self):
        with self.assertRaises(DateRangeError):
            parse_date_range('2024-02-01', '2024-01-01')


class DashboardTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_stock_figures(self):
        TestDataFactory.create_product(name='Rice', quantity=10, unit_price=Decimal('3000'), min_threshold=5)
        TestDataFactory.create_product(name='Oil', quantity=2, unit_price=Decimal('15000'), min_threshold=5)
        TestDataFactory.create_product(name='Old', quantity=50, unit_price=Decimal('100'), is_archived=True)

        response = self.client.get('/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['product_count'], 2)
        self.assertEqual(response.data['total_items'], 12)
        self.assertEqual(response.data['stock_value'], Decimal('60000'))
        self.assertEqual(response.data['critical_count'], 1)
        self.assertEqual(response.data['critical_products'][0]['name'], 'Oil')

    def test_last_seven_days(self):
        rice = TestDataFactory.create_product(name='Rice', quantity=100, unit_price=Decimal('1000'))

        for days_ago, quantity in ((0, 2), (3, 1), (9, 4)):
            sale = Sale.objects.create(seller=self.user, seller_name='Test')
            SaleLine.objects.create(sale=sale, product=rice, quantity=quantity)
            sale.calculate_totals()
            Sale.objects.filter(pk=sale.pk).update(created_at=timezone.now() - timedelta(days=days_ago))

        days = self.client.get('/reports/dashboard/').data['sales_last_7_days']
        today = timezone.localdate()

        self.assertEqual(len(days), 7)
        self.assertEqual(days[0]['date'], (today - timedelta(days=6)).isoformat())
        self.assertEqual(days[-1]['date'], today.isoformat())
        self.assertEqual(days[-1]['total'], Decimal('2000'))
        self.assertEqual(days[3]['total'], Decimal('1000'))
        self.assertEqual(days[0]['total'], Decimal('0.00'))
        self.assertEqual(days[-1]['label'], today.strftime('%a'))

        response = self.client.get('/reports/dashboard/')
        self.assertEqual(response.data['revenue_last_7_days'], Decimal('3000'))


class StockSynthesisViewTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        rice = TestDataFactory.create_product(name='Rice', quantity=20, unit_price=Decimal('3000'))
        rice.apply_movement(StockMovement.TYPE_OUT, 5, 'sale')

    def test_synthesis(self):
        today = timezone.localdate().isoformat()
        response = self.client.get(f'/reports/synthesis/?date_from={today}&date_to={today}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        rice = response.data['products'][0]
        self.assertEqual(rice['total_in'], 20)
        self.assertEqual(rice['total_out'], 5)
        self.assertEqual(rice['value_out'], Decimal('15000'))
        self.assertEqual(response.data['totals']['movement_count'], 2)

    def test_range_excludes_other_days(self):
        response = self.client.get('/reports/synthesis/?date_from=2000-01-01&date_to=2000-01-31')
        self.assertEqual(response.data['products'], [])

    def test_invalid_dates(self):
        response = self.client.get('/reports/synthesis/?date_from=2024-99-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get('/reports/synthesis/?date_from=2024-02-01&date_to=2024-01-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_export(self):
        response = self.client.get('/reports/synthesis/?format=xlsx')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.content.startswith(b'PK'))

        response = self.client.get('/reports/synthesis/?format=doc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class InventoryExportTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        for index in range(60):
            TestDataFactory.create_product(name=f'Product {index:02d}', quantity=index)

    def test_pdf_spans_several_pages(self):
        response = self.client.get('/reports/inventory/export/?format=pdf')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.content.startswith(b'%PDF'))
        self.assertIn('inventory-', response['Content-Disposition'])

    def test_xlsx(self):
        response = self.client.get('/reports/inventory/export/?format=xlsx')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_unsupported_format(self):
        response = self.client.get('/reports/inventory/export/?format=txt')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
