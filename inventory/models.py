from django.db import models
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


def default_min_threshold():
    return settings.DEFAULT_MIN_THRESHOLD


class Category(models.Model):
    """
    Product categories (Drinks, Groceries, Hardware, etc.)
    """

    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Category name (e.g., 'Drinks', 'Groceries')",
    )
    description = models.TextField(
        blank=True, null=True, help_text="Optional category description"
    )

    slug = models.SlugField(
        unique=True, help_text="URL-friendly version of category name"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = "inventory_category"
        verbose_name_plural = "Categories"
        ordering = ["name"]


class Product(models.Model):
    """
    Catalog item with its stock level, unit price and alert threshold
    """

    STATUS_OUT = "out"
    STATUS_CRITICAL = "critical"
    STATUS_IN_STOCK = "in_stock"

    name = models.CharField(max_length=200, help_text="Product name")

    sku = models.CharField(
        max_length=100,
        unique=True,
        blank=True,
        null=True,
        help_text="Stock Keeping Unit - unique product identifier",
    )

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
        help_text="Product category",
    )

    quantity = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Available stock quantity",
    )

    min_threshold = models.IntegerField(
        default=default_min_threshold,
        validators=[MinValueValidator(0)],
        help_text="Stock level at or below which the product is critical",
    )

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Selling price per unit",
    )

    image = models.ImageField(
        upload_to="products/", blank=True, null=True, help_text="Product image"
    )

    is_archived = models.BooleanField(
        default=False, help_text="Archived products are hidden from the till"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.quantity})"

    @property
    def is_out_of_stock(self):
        return self.quantity == 0

    @property
    def is_critical(self):
        """At or below the alert threshold (includes out of stock)"""
        return self.quantity <= self.min_threshold

    @property
    def is_low_stock(self):
        """Still available but at or below the alert threshold"""
        return 0 < self.quantity <= self.min_threshold

    @property
    def stock_status(self):
        if self.is_out_of_stock:
            return self.STATUS_OUT
        if self.is_critical:
            return self.STATUS_CRITICAL
        return self.STATUS_IN_STOCK

    @property
    def stock_value(self):
        return self.quantity * self.unit_price

    def apply_movement(self, movement_type, quantity, reason, user=None):
        """
        Change the stock level and record the matching stock movement.
        Must run inside a transaction when called from a checkout.
        """
        if quantity <= 0:
            raise ValidationError("Movement quantity must be greater than 0")

        if movement_type == StockMovement.TYPE_OUT:
            if quantity > self.quantity:
                raise ValidationError(
                    f"Only {self.quantity} units of {self.name} available in stock"
                )
            self.quantity -= quantity
        elif movement_type == StockMovement.TYPE_IN:
            self.quantity += quantity
        else:
            raise ValidationError(f"Unknown movement type: {movement_type}")

        self.save(update_fields=["quantity", "updated_at"])

        return StockMovement.objects.create(
            product=self,
            type=movement_type,
            quantity=quantity,
            reason=reason,
            created_by=user if user is not None and user.is_authenticated else None,
        )

    def save(self, *args, **kwargs):
        """Override save to generate SKU if not provided"""
        if not self.sku:
            self.sku = f"PRD-{uuid.uuid4().hex[:8].upper()}"
        super().save(*args, **kwargs)

    class Meta:
        db_table = "inventory_product"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="inventory_product_name_idx"),
            models.Index(fields=["is_archived", "quantity"], name="inventory_product_stock_idx"),
        ]


class StockMovement(models.Model):
    """
    Tracking of stock changes
    """

    TYPE_IN = "in"
    TYPE_OUT = "out"

    TYPE_CHOICES = [
        (TYPE_IN, "In"),
        (TYPE_OUT, "Out"),
    ]

    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name="stock_movements"
    )

    type = models.CharField(max_length=3, choices=TYPE_CHOICES)

    quantity = models.IntegerField(
        validators=[MinValueValidator(1)],
        help_text="Number of units moved (always positive, see type)",
    )

    reason = models.CharField(
        max_length=100,
        help_text="Why stock changed: 'initial_stock', 'restock', 'sale', 'adjustment'",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        sign = "+" if self.type == self.TYPE_IN else "-"
        return f"{self.product.name}: {sign}{self.quantity} ({self.reason})"

    @property
    def signed_quantity(self):
        return self.quantity if self.type == self.TYPE_IN else -self.quantity

    @property
    def value(self):
        return self.quantity * self.product.unit_price

    @property
    def author_name(self):
        if self.created_by is None:
            return "System"
        return self.created_by.display_name

    class Meta:
        db_table = "inventory_stock_movement"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="inventory_movement_date_idx"),
            models.Index(fields=["product", "created_at"], name="inventory_movement_prod_idx"),
        ]
