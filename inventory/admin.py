from django.contrib import admin
from django.db import transaction
from .models import Category, Product, StockMovement


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'created_at']
    search_fields = ['name']
    prepopulated_fields = {'slug': ('name',)}


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'sku', 'category', 'unit_price', 'quantity', 'min_threshold', 'is_archived']
    list_filter = ['category', 'is_archived', 'created_at']
    search_fields = ['name', 'sku']
    readonly_fields = ['sku', 'created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'category', 'sku')
        }),
        ('Pricing & Stock', {
            'fields': ('unit_price', 'quantity', 'min_threshold', 'is_archived')
        }),
        ('Media', {
            'fields': ('image',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    def save_model(self, request, obj, form, change):
        """Save the product, then record any quantity change as a stock movement"""
        target = obj.quantity
        with transaction.atomic():
            if change:
                obj.quantity = Product.objects.select_for_update().values_list(
                    'quantity', flat=True
                ).get(pk=obj.pk)
            else:
                obj.quantity = 0
            super().save_model(request, obj, form, change)

            diff = target - obj.quantity
            reason = 'adjustment' if change else 'initial_stock'
            if diff > 0:
                obj.apply_movement(StockMovement.TYPE_IN, diff, reason, request.user)
            elif diff < 0:
                obj.apply_movement(StockMovement.TYPE_OUT, -diff, reason, request.user)


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ['product', 'type', 'quantity', 'reason', 'created_by', 'created_at']
    list_filter = ['type', 'reason', 'created_at']
    search_fields = ['product__name', 'reason']
    readonly_fields = ['created_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
