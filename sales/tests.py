"""
Tests for the sales history, receipts and exports
"""
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from stockpos.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Sale, SaleLine


def make_sale(seller, lines, days_ago=0):
    """lines: [(product, quantity), ...]"""
    sale = Sale.objects.create(seller=seller, seller_name=seller.display_name)
    for product, quantity in lines:
        SaleLine.objects.create(sale=sale, product=product, quantity=quantity)
    sale.calculate_totals()
    if days_ago:
        Sale.objects.filter(pk=sale.pk).update(created_at=timezone.now() - timedelta(days=days_ago))
        sale.refresh_from_db()
    return sale


class SaleModelTests(TestCase):

    def test_reference_and_totals(self):
        seller = TestDataFactory.create_user()
        rice = TestDataFactory.create_product(name='Rice', unit_price=Decimal('3000'))
        sale = make_sale(seller, [(rice, 2)])

        self.assertRegex(sale.reference, r'^VNT-[0-9A-F]{8}$')
        self.assertEqual(sale.transaction_number, sale.reference[4:])
        self.assertEqual(sale.total_amount, Decimal('6000'))

    def test_line_copies_product_details(self):
        seller = TestDataFactory.create_user()
        rice = TestDataFactory.create_product(name='Rice', unit_price=Decimal('3000'), sku='RICE-1')
        line = make_sale(seller, [(rice, 2)]).lines.get()

        self.assertEqual(line.product_name, 'Rice')
        self.assertEqual(line.product_sku, 'RICE-1')
        self.assertEqual(line.total_price, Decimal('6000'))

    def test_line_survives_product_deletion(self):
        seller = TestDataFactory.create_user()
        rice = TestDataFactory.create_product(name='Rice')
        sale = make_sale(seller, [(rice, 1)])
        rice.delete()

        line = sale.lines.get()
        self.assertIsNone(line.product)
        self.assertEqual(line.product_name, 'Rice')


class SalesHistoryTests(TestCase):
    """Test the filtered, paginated sales history"""

    def setUp(self):
        self.awa = TestDataFactory.create_user(first_name='Awa', last_name='Diallo')
        self.moussa = TestDataFactory.create_user(first_name='Moussa', last_name='Keita')
        self.client = AuthenticatedAPIClient().authenticate_user(self.awa)

        self.rice = TestDataFactory.create_product(name='Rice', quantity=100, unit_price=Decimal('3000'))
        self.soap = TestDataFactory.create_product(name='Soap', quantity=100, unit_price=Decimal('1000'))

        self.old_sale = make_sale(self.awa, [(self.rice, 1)], days_ago=10)
        self.soap_sale = make_sale(self.moussa, [(self.soap, 2)])
        self.mixed_sale = make_sale(self.awa, [(self.rice, 1), (self.soap, 1)])

    def test_history_is_newest_first_with_summary(self):
        response = self.client.get('/sales/history/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        ids = [s['id'] for s in response.data['sales']]
        self.assertEqual(ids, [self.mixed_sale.id, self.soap_sale.id, self.old_sale.id])
        self.assertEqual(response.data['summary']['count'], 3)
        self.assertEqual(Decimal(str(response.data['summary']['total_revenue'])), Decimal('9000'))

    def test_search_by_product_name(self):
        response = self.client.get('/sales/history/?search=soap')
        ids = {s['id'] for s in response.data['sales']}
        self.assertEqual(ids, {self.soap_sale.id, self.mixed_sale.id})
        self.assertEqual(response.data['summary']['count'], 2)

    def test_search_by_seller_name(self):
        response = self.client.get('/sales/history/?search=moussa')
        self.assertEqual([s['id'] for s in response.data['sales']], [self.soap_sale.id])

    def test_date_range_is_inclusive(self):
        today = timezone.localdate().isoformat()
        response = self.client.get(f'/sales/history/?date_from={today}&date_to={today}')
        self.assertEqual(response.data['summary']['count'], 2)

    def test_invalid_date(self):
        response = self.client.get('/sales/history/?date_from=yesterday')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pagination(self):
        for _ in range(5):
            make_sale(self.awa, [(self.soap, 1)])

        response = self.client.get('/sales/history/')
        self.assertEqual(len(response.data['sales']), 6)
        self.assertEqual(response.data['pagination']['total_pages'], 2)

        response = self.client.get('/sales/history/?page_size=100')
        self.assertEqual(len(response.data['sales']), 8)

    def test_sale_detail(self):
        response = self.client.get(f'/sales/detail/{self.mixed_sale.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sale']['item_count'], 2)
        self.assertEqual(len(response.data['sale']['lines']), 2)

    def test_unknown_sale(self):
        response = self.client.get('/sales/detail/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class SaleDocumentTests(TestCase):
    """Test the PDF receipt and history exports"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        rice = TestDataFactory.create_product(name='Rice', quantity=10)
        self.sale = make_sale(self.user, [(rice, 2)])

    def test_receipt_is_pdf(self):
        response = self.client.get(f'/sales/receipt/{self.sale.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn(self.sale.transaction_number, response['Content-Disposition'])
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_export_pdf(self):
        response = self.client.get('/sales/export/?format=pdf')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_export_xlsx(self):
        response = self.client.get('/sales/export/?format=xlsx')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('spreadsheetml', response['Content-Type'])
        # xlsx files are zip archives
        self.assertTrue(response.content.startswith(b'PK'))

    def test_export_unknown_format(self):
        response = self.client.get('/sales/export/?format=csv')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
