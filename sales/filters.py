import django_filters
from django.db.models import Q
from .models import Sale, SaleLine


class SaleFilter(django_filters.FilterSet):
    """Filter for the sales history (also used by the export)"""

    # Matches the seller or any line's product name
    search = django_filters.CharFilter(method='filter_search', label='Search')

    date_from = django_filters.DateFilter(field_name='created_at__date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='created_at__date', lookup_expr='lte')

    seller = django_filters.NumberFilter(field_name='seller_id')

    class Meta:
        model = Sale
        fields = ['search', 'date_from', 'date_to', 'seller']

    def filter_search(self, queryset, name, value):
        value = (value or '').strip()
        if not value:
            return queryset
        matching_lines = SaleLine.objects.filter(
            product_name__icontains=value
        ).values('sale_id')
        return queryset.filter(
            Q(seller_name__icontains=value) | Q(id__in=matching_lines)
        )
