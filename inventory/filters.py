import django_filters
from django.db.models import F, Q
from .models import Product, StockMovement


class ProductFilter(django_filters.FilterSet):
    """Filter for the inventory table using django-filter"""

    # Searches name and SKU
    search = django_filters.CharFilter(method='filter_search', label='Search')

    category = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')

    # all / low / out
    stock = django_filters.ChoiceFilter(
        method='filter_stock',
        choices=[('all', 'All'), ('low', 'Low'), ('out', 'Out of stock')],
        label='Stock status',
    )

    include_archived = django_filters.BooleanFilter(
        method='filter_include_archived', label='Include archived'
    )

    class Meta:
        model = Product
        fields = ['search', 'category', 'stock', 'include_archived']

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        # Archived products stay hidden unless explicitly requested
        if not self.form.cleaned_data.get('include_archived'):
            queryset = queryset.filter(is_archived=False)
        return queryset

    def filter_search(self, queryset, name, value):
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(sku__icontains=value))

    def filter_stock(self, queryset, name, value):
        if value == 'low':
            return queryset.filter(quantity__gt=0, quantity__lte=F('min_threshold'))
        if value == 'out':
            return queryset.filter(quantity=0)
        return queryset

    def filter_include_archived(self, queryset, name, value):
        # Handled in filter_queryset so that the default (absent) also applies
        return queryset


class StockMovementFilter(django_filters.FilterSet):
    """Filter for the stock movement journal"""

    author = django_filters.CharFilter(method='filter_author', label='Author')
    type = django_filters.ChoiceFilter(choices=StockMovement.TYPE_CHOICES)
    product = django_filters.NumberFilter(field_name='product_id')

    class Meta:
        model = StockMovement
        fields = ['author', 'type', 'product']

    def filter_author(self, queryset, name, value):
        if not value or value == 'all':
            return queryset
        if value == 'system':
            return queryset.filter(created_by__isnull=True)
        if not value.isdigit():
            return queryset.none()
        return queryset.filter(created_by_id=int(value))
