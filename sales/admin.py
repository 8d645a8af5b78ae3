from django.contrib import admin
from .models import Sale, SaleLine


class SaleLineInline(admin.TabularInline):
    model = SaleLine
    extra = 0
    readonly_fields = ['product', 'product_name', 'product_sku', 'quantity', 'unit_price']


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['reference', 'seller_name', 'total_amount', 'created_at']
    search_fields = ['reference', 'seller_name', 'lines__product_name']
    list_filter = ['created_at']
    readonly_fields = ['reference', 'seller', 'seller_name', 'total_amount', 'created_at']
    inlines = [SaleLineInline]
