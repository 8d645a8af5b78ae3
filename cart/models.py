from django.db import models
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from decimal import Decimal


class Cart(models.Model):
    """
    The seller's basket at the till, one per user
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart",
        help_text="Cart owner",
    )
    created_at = models.DateTimeField(
        auto_now_add=True, help_text="When cart was first created"
    )
    updated_at = models.DateTimeField(
        auto_now=True, help_text="When cart was last modified"
    )

    def __str__(self):
        return f"Cart for {self.user.username}"

    @property
    def total_items(self):
        """Total number of units in cart"""
        return self.cart_items.aggregate(total=models.Sum("quantity"))["total"] or 0

    @property
    def total_price(self):
        """Sum of unit_price * quantity over the cart lines"""
        total = self.cart_items.aggregate(
            total=models.Sum(
                models.F("quantity") * models.F("product__unit_price"),
                output_field=models.DecimalField(max_digits=14, decimal_places=2),
            )
        )["total"]
        return total or Decimal("0.00")

    @property
    def is_empty(self):
        return not self.cart_items.exists()

    def clear(self):
        """Remove all items from cart"""
        self.cart_items.all().delete()

    class Meta:
        db_table = "cart_cart"


class CartItem(models.Model):
    """
    A product and the quantity about to be sold
    """

    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="cart_items")

    product = models.ForeignKey(
        "inventory.Product",
        on_delete=models.CASCADE,
        related_name="cart_items",
        help_text="Reference to the catalog product",
    )

    quantity = models.IntegerField(
        validators=[MinValueValidator(1)], help_text="Quantity of product in cart"
    )

    added_at = models.DateTimeField(
        auto_now_add=True, help_text="When product was added to cart"
    )

    updated_at = models.DateTimeField(
        auto_now=True, help_text="When cart item was last updated"
    )

    def __str__(self):
        return f"{self.product.name} x{self.quantity} in {self.cart.user.username}'s cart"

    @property
    def total_price(self):
        return self.quantity * self.product.unit_price

    @property
    def is_available(self):
        """Requested quantity can still be sold"""
        return not self.product.is_archived and self.product.quantity >= self.quantity

    def clean(self):
        if self.product.is_archived:
            raise ValidationError("Cannot add an archived product to cart")

        if self.quantity > self.product.quantity:
            raise ValidationError("Insufficient stock")

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    class Meta:
        db_table = "cart_cartitem"
        unique_together = ["cart", "product"]
        ordering = ["-added_at"]
