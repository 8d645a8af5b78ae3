from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.conf import settings
from django.db.models import DecimalField, ExpressionWrapper, F, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal
import logging

from inventory.models import Product, StockMovement
from inventory.serializers import ProductListSerializer
from sales.models import Sale
from .exports import EXPORT_FORMATS, export_response, money
from .synthesis import DateRangeError, build_synthesis, parse_date_range, period_label

logger = logging.getLogger(__name__)

DASHBOARD_DAYS = 7

STATUS_LABELS = {
    Product.STATUS_OUT: 'Out of stock',
    Product.STATUS_CRITICAL: 'Critical',
    Product.STATUS_IN_STOCK: 'In stock',
}


def unsupported_format(fmt):
    return Response({
        'success': False,
        'message': f"Unsupported format '{fmt}'. Use one of: {', '.join(EXPORT_FORMATS)}"
    }, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """
    Stock figures, critical products and the last 7 days of revenue
    GET /reports/dashboard
    """
    try:
        products = Product.objects.filter(is_archived=False)

        stock = products.aggregate(
            total_items=Sum('quantity'),
            stock_value=Sum(
                ExpressionWrapper(
                    F('quantity') * F('unit_price'),
                    output_field=DecimalField(max_digits=16, decimal_places=2)
                )
            )
        )

        critical = products.filter(quantity__lte=F('min_threshold')).order_by('quantity', 'name')

        today = timezone.localdate()
        start = today - timedelta(days=DASHBOARD_DAYS - 1)
        daily = {
            row['day']: row['total']
            for row in Sale.objects.filter(created_at__date__gte=start, created_at__date__lte=today)
            .annotate(day=TruncDate('created_at'))
            .values('day')
            .annotate(total=Sum('total_amount'))
            .order_by('day')
        }

        sales_last_7_days = []
        for offset in range(DASHBOARD_DAYS):
            day = start + timedelta(days=offset)
            sales_last_7_days.append({
                'date': day.isoformat(),
                'label': day.strftime('%a'),
                'total': daily.get(day) or Decimal('0.00'),
            })

        return Response({
            'success': True,
            'product_count': products.count(),
            'total_items': stock['total_items'] or 0,
            'stock_value': stock['stock_value'] or Decimal('0.00'),
            'critical_count': critical.count(),
            'critical_products': ProductListSerializer(critical, many=True).data,
            'sales_last_7_days': sales_last_7_days,
            'revenue_last_7_days': sum(
                (entry['total'] for entry in sales_last_7_days), Decimal('0.00')
            ),
        })

    except Exception as e:
        logger.error(f"Error building dashboard: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to build dashboard',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_synthesis(request):
    """
    In/out totals per product over a period, optionally exported
    GET /reports/synthesis?date_from=2024-01-01&date_to=2024-01-31
    GET /reports/synthesis?date_from=2024-01-01&format=xlsx
    """
    fmt = request.GET.get('format', '').lower()
    if fmt and fmt not in EXPORT_FORMATS:
        return unsupported_format(fmt)

    try:
        start, end = parse_date_range(request.GET.get('date_from'), request.GET.get('date_to'))
    except DateRangeError as e:
        return Response({
            'success': False,
            'message': str(e)
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        movements = StockMovement.objects.all()
        if start:
            movements = movements.filter(created_at__date__gte=start)
        if end:
            movements = movements.filter(created_at__date__lte=end)

        rows = movements.values(
            'product_id', 'type', 'quantity',
            product_name=F('product__name'),
            unit_price=F('product__unit_price'),
        )
        products, totals = build_synthesis(rows)

        if not fmt:
            return Response({
                'success': True,
                'period': {
                    'date_from': start.isoformat() if start else None,
                    'date_to': end.isoformat() if end else None,
                },
                'products': products,
                'totals': totals
            })

        logger.info(f"Stock synthesis exported as {fmt} by {request.user.username}")

        return export_response(
            fmt,
            filename=f"synthesis-{timezone.localdate():%Y%m%d}",
            title=f"{settings.SHOP_NAME} - Stock synthesis",
            headers=['Product', 'In', 'Out', 'Net', 'Movements', f'Value out ({settings.CURRENCY_LABEL})'],
            rows=[
                [g['product_name'], g['total_in'], g['total_out'], g['net'], g['movement_count'], g['value_out']]
                for g in products
            ],
            footer=[
                'TOTAL', totals['total_in'], totals['total_out'], totals['net'],
                totals['movement_count'], money(totals['value_out'])
            ],
            subtitle_lines=[f"Period: {period_label(start, end)}"],
        )

    except Exception as e:
        logger.error(f"Error building stock synthesis: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to build stock synthesis',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def export_inventory(request):
    """
    Current product table as PDF or Excel
    GET /reports/inventory/export?format=pdf
    """
    fmt = request.GET.get('format', 'pdf').lower()
    if fmt not in EXPORT_FORMATS:
        return unsupported_format(fmt)

    try:
        products = list(Product.objects.filter(is_archived=False).order_by('name'))
        total_value = sum((p.stock_value for p in products), Decimal('0.00'))

        logger.info(f"Inventory exported as {fmt} by {request.user.username}")

        return export_response(
            fmt,
            filename=f"inventory-{timezone.localdate():%Y%m%d}",
            title=f"{settings.SHOP_NAME} - Inventory",
            headers=[
                'Product', 'SKU', 'Quantity', 'Threshold',
                f'Unit price ({settings.CURRENCY_LABEL})', f'Value ({settings.CURRENCY_LABEL})', 'Status'
            ],
            rows=[
                [
                    p.name, p.sku, p.quantity, p.min_threshold,
                    p.unit_price, p.stock_value, STATUS_LABELS[p.stock_status]
                ]
                for p in products
            ],
            footer=[
                'TOTAL', f'{len(products)} products', sum(p.quantity for p in products),
                '', '', money(total_value), ''
            ],
            subtitle_lines=[f"Generated on {timezone.localtime().strftime('%Y-%m-%d %H:%M')}"],
        )

    except Exception as e:
        logger.error(f"Error exporting inventory: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to export inventory',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
