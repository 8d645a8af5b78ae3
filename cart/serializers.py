from rest_framework import serializers
from .models import Cart, CartItem


class CartItemSerializer(serializers.ModelSerializer):
    """
    Serializer for cart items
    """

    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)
    unit_price = serializers.DecimalField(
        source="product.unit_price", max_digits=12, decimal_places=2, read_only=True
    )
    stock = serializers.IntegerField(source="product.quantity", read_only=True)
    product_image = serializers.SerializerMethodField()
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    is_available = serializers.ReadOnlyField()

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product",
            "product_name",
            "product_sku",
            "unit_price",
            "stock",
            "product_image",
            "quantity",
            "total_price",
            "is_available",
            "added_at",
        ]
        read_only_fields = ["id", "added_at"]

    def get_product_image(self, obj):
        if obj.product.image:
            request = self.context.get("request")
            if request:
                return request.build_absolute_uri(obj.product.image.url)
            return obj.product.image.url
        return None


class AddToCartSerializer(serializers.Serializer):
    """
    Serializer for adding products to cart
    """

    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateCartItemSerializer(serializers.Serializer):
    """
    Either an absolute quantity or a signed delta (+1 / -1 buttons)
    """

    quantity = serializers.IntegerField(required=False)
    delta = serializers.IntegerField(required=False)

    def validate(self, attrs):
        if "quantity" not in attrs and "delta" not in attrs:
            raise serializers.ValidationError("Provide either 'quantity' or 'delta'")
        if "quantity" in attrs and "delta" in attrs:
            raise serializers.ValidationError("Provide only one of 'quantity' or 'delta'")
        return attrs

    def target_quantity(self, current):
        """New quantity, never below 1"""
        if "quantity" in self.validated_data:
            wanted = self.validated_data["quantity"]
        else:
            wanted = current + self.validated_data["delta"]
        return max(1, wanted)


class CartSerializer(serializers.ModelSerializer):
    """
    Serializer for complete cart information
    """

    cart_items = CartItemSerializer(many=True, read_only=True)
    total_items = serializers.ReadOnlyField()
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    is_empty = serializers.ReadOnlyField()

    class Meta:
        model = Cart
        fields = [
            "id",
            "total_items",
            "total_price",
            "is_empty",
            "cart_items",
            "created_at",
            "updated_at",
        ]
