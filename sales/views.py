from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from rest_framework.exceptions import NotFound
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.db.models import Sum
from django.conf import settings
from django.utils import timezone
from decimal import Decimal
import logging

from reports.exports import EXPORT_FORMATS, export_response, money, render_receipt_pdf
from .filters import SaleFilter
from .models import Sale
from .serializers import SaleListSerializer, SaleDetailSerializer

logger = logging.getLogger(__name__)


class SalePagination(PageNumberPagination):
    """
    Custom pagination for the sales history
    """
    page_size = 6
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data, summary=None):
        return Response({
            'success': True,
            'pagination': {
                'count': self.page.paginator.count,
                'next': self.get_next_link(),
                'previous': self.get_previous_link(),
                'current_page': self.page.number,
                'total_pages': self.page.paginator.num_pages,
                'page_size': self.get_page_size(self.request)
            },
            'summary': summary,
            'sales': data
        })


def filtered_sales(request):
    """Apply the history filters; returns (filterset, queryset or None)"""
    filterset = SaleFilter(
        request.query_params,
        queryset=Sale.objects.order_by('-created_at', '-id')
    )
    if not filterset.is_valid():
        return filterset, None
    return filterset, filterset.qs


def invalid_filters(filterset):
    return Response({
        'success': False,
        'message': 'Invalid filters',
        'errors': filterset.errors
    }, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_history(request):
    """
    Sales history with search, date range and pagination
    GET /sales/history
    GET /sales/history?search=rice&date_from=2024-01-01&date_to=2024-01-31
    """
    filterset, sales = filtered_sales(request)
    if sales is None:
        return invalid_filters(filterset)

    try:
        summary = {
            'total_revenue': sales.aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00'),
            'count': sales.count(),
        }

        paginator = SalePagination()
        page = paginator.paginate_queryset(sales.prefetch_related('lines'), request)
        serializer = SaleListSerializer(page, many=True)

        return paginator.get_paginated_response(serializer.data, summary=summary)

    except NotFound:
        raise

    except Exception as e:
        logger.error(f"Error retrieving sales history: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to retrieve sales',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sale_detail(request, sale_id):
    """
    Get detailed information about a specific sale
    GET /sales/detail/<sale_id>
    """
    sale = get_object_or_404(Sale.objects.prefetch_related('lines'), id=sale_id)
    serializer = SaleDetailSerializer(sale)

    return Response({
        'success': True,
        'sale': serializer.data
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sale_receipt(request, sale_id):
    """
    Printable PDF receipt
    GET /sales/receipt/<sale_id>
    """
    sale = get_object_or_404(Sale, id=sale_id)

    try:
        content = render_receipt_pdf(sale)
    except Exception as e:
        logger.error(f"Error rendering receipt for sale {sale.reference}: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to generate receipt',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = HttpResponse(content, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="receipt-{sale.transaction_number}.pdf"'
    return response


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def export_sales(request):
    """
    Export the filtered sales history
    GET /sales/export?format=pdf
    GET /sales/export?format=xlsx&date_from=2024-01-01
    """
    fmt = request.GET.get('format', 'pdf').lower()
    if fmt not in EXPORT_FORMATS:
        return Response({
            'success': False,
            'message': f"Unsupported format '{fmt}'. Use one of: {', '.join(EXPORT_FORMATS)}"
        }, status=status.HTTP_400_BAD_REQUEST)

    filterset, sales = filtered_sales(request)
    if sales is None:
        return invalid_filters(filterset)

    try:
        sales = list(sales.prefetch_related('lines'))
        total = sum((sale.total_amount for sale in sales), Decimal('0.00'))

        rows = [
            [
                sale.created_at,
                sale.transaction_number,
                sale.seller_name,
                ', '.join(line.product_name for line in sale.lines.all()),
                sum(line.quantity for line in sale.lines.all()),
                sale.total_amount,
            ]
            for sale in sales
        ]

        subtitle = [f"Generated on {timezone.localtime().strftime('%Y-%m-%d %H:%M')}"]
        date_from = filterset.form.cleaned_data.get('date_from')
        date_to = filterset.form.cleaned_data.get('date_to')
        if date_from or date_to:
            subtitle.append(f"Period: {date_from or '...'} to {date_to or '...'}")

        logger.info(f"Sales exported as {fmt} ({len(sales)} sales) by {request.user.username}")

        return export_response(
            fmt,
            filename=f"sales-{timezone.localdate():%Y%m%d}",
            title=f"{settings.SHOP_NAME} - Sales history",
            headers=['Date', 'Transaction', 'Seller', 'Products', 'Items', f'Total ({settings.CURRENCY_LABEL})'],
            rows=rows,
            footer=['TOTAL', f'{len(sales)} sales', '', '', sum(row[4] for row in rows), money(total)],
            subtitle_lines=subtitle,
        )

    except Exception as e:
        logger.error(f"Error exporting sales: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to export sales',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
