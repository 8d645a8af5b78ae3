# sales/models.py

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
import uuid
from decimal import Decimal


class Sale(models.Model):
    """
    A checkout transaction (one or more sale lines)
    """

    # Sale identification
    reference = models.CharField(
        max_length=100,
        unique=True,
        blank=True,
        help_text="Unique sale identifier (e.g., VNT-ABC12345)"
    )

    # Seller info
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sales',
        help_text="User who ran the checkout"
    )

    seller_name = models.CharField(
        max_length=200,
        help_text="Seller name at time of sale"
    )

    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Sum of all sale lines"
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the sale was made"
    )

    def __str__(self):
        return f"Sale {self.reference} - {self.seller_name}"

    def save(self, *args, **kwargs):
        """Generate reference if not provided"""
        if not self.reference:
            self.reference = f"VNT-{uuid.uuid4().hex[:8].upper()}"
        super().save(*args, **kwargs)

    @property
    def transaction_number(self):
        """Short number printed on receipts"""
        return self.reference.split('-')[-1]

    @property
    def item_count(self):
        """Total number of units in the sale"""
        return self.lines.aggregate(
            total=models.Sum('quantity')
        )['total'] or 0

    def calculate_totals(self):
        """Recalculate sale total based on sale lines"""
        total = self.lines.aggregate(
            total=models.Sum(
                models.F('quantity') * models.F('unit_price'),
                output_field=models.DecimalField(max_digits=14, decimal_places=2)
            )
        )['total'] or Decimal('0.00')

        self.total_amount = total
        self.save(update_fields=['total_amount'])

    class Meta:
        db_table = 'sales_sale'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['created_at'], name='sales_sale_date_idx'),
            models.Index(fields=['seller', 'created_at'], name='sales_sale_seller_idx'),
        ]


class SaleLine(models.Model):
    """
    One product within a sale
    """

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name='lines'
    )

    # Product info (stored to preserve historical data)
    product = models.ForeignKey(
        'inventory.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sale_lines',
        help_text="Reference to the catalog product"
    )

    product_name = models.CharField(
        max_length=200,
        help_text="Product name at time of sale"
    )

    product_sku = models.CharField(
        max_length=100,
        blank=True,
        null=True,
        help_text="Product SKU at time of sale"
    )

    quantity = models.IntegerField(
        validators=[MinValueValidator(1)],
        help_text="Quantity sold"
    )

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Price per unit at time of sale"
    )

    def __str__(self):
        return f"{self.product_name} x{self.quantity} - Sale {self.sale.reference}"

    @property
    def total_price(self):
        """Total price for this sale line"""
        return self.quantity * self.unit_price

    def save(self, *args, **kwargs):
        """Auto-populate product details from the catalog"""
        if not self.product_name and self.product:
            self.product_name = self.product.name
            self.product_sku = self.product.sku
            self.unit_price = self.product.unit_price
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'sales_saleline'
        unique_together = ['sale', 'product']
