from rest_framework import serializers
from django.conf import settings
from django.utils.text import slugify
from .models import Category, Product, StockMovement


class CategorySerializer(serializers.ModelSerializer):
    """
    Serializer for Category model
    """
    class Meta:
        model = Category
        fields = ['id', 'name', 'description', 'slug', 'created_at', 'updated_at']
        read_only_fields = ['slug', 'created_at', 'updated_at']

    def validate_name(self, value):
        """Slug must stay unique too"""
        if Category.objects.filter(slug=slugify(value)).exists():
            raise serializers.ValidationError("A category with this name already exists")
        return value

    def create(self, validated_data):
        """Auto-generate slug from name"""
        validated_data['slug'] = slugify(validated_data['name'])
        return super().create(validated_data)


class ProductListSerializer(serializers.ModelSerializer):
    """
    Serializer for listing products (table rows)
    """
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    stock_status = serializers.ReadOnlyField()
    is_low_stock = serializers.ReadOnlyField()
    stock_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'sku', 'category', 'category_name', 'unit_price',
            'quantity', 'min_threshold', 'stock_status', 'is_low_stock',
            'stock_value', 'is_archived', 'created_at'
        ]


class ProductDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for detailed product view (full data)
    """
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    stock_status = serializers.ReadOnlyField()
    is_low_stock = serializers.ReadOnlyField()
    is_critical = serializers.ReadOnlyField()
    stock_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'sku', 'category', 'category_name', 'unit_price',
            'quantity', 'min_threshold', 'image', 'is_archived', 'stock_status',
            'is_low_stock', 'is_critical', 'stock_value', 'created_at', 'updated_at'
        ]
        read_only_fields = ['sku', 'created_at', 'updated_at']


class ProductCreateSerializer(serializers.ModelSerializer):
    """
    Serializer for creating new products
    """
    min_threshold = serializers.IntegerField(min_value=0, required=False)

    class Meta:
        model = Product
        fields = [
            'name', 'sku', 'category', 'unit_price', 'quantity',
            'min_threshold', 'image'
        ]

    def validate_unit_price(self, value):
        """Validate price is not negative"""
        if value < 0:
            raise serializers.ValidationError("Unit price cannot be negative")
        return value

    def validate_quantity(self, value):
        """Validate quantity is non-negative"""
        if value < 0:
            raise serializers.ValidationError("Quantity cannot be negative")
        return value

    def validate_sku(self, value):
        """Empty SKU means 'generate one'"""
        return value or None

    def create(self, validated_data):
        """Create product and log initial stock as a movement"""
        user = self.context.get('user')
        initial_quantity = validated_data.pop('quantity', 0)
        validated_data.setdefault('min_threshold', settings.DEFAULT_MIN_THRESHOLD)

        product = Product.objects.create(quantity=0, **validated_data)

        if initial_quantity > 0:
            product.apply_movement(
                StockMovement.TYPE_IN, initial_quantity, 'initial_stock', user
            )

        return product


class ProductUpdateSerializer(serializers.ModelSerializer):
    """
    Serializer for updating products. A quantity change is recorded
    as an 'adjustment' stock movement.
    """
    class Meta:
        model = Product
        fields = [
            'name', 'sku', 'category', 'unit_price', 'quantity',
            'min_threshold', 'image'
        ]

    def validate_unit_price(self, value):
        """Validate price is not negative"""
        if value < 0:
            raise serializers.ValidationError("Unit price cannot be negative")
        return value

    def validate_quantity(self, value):
        """Validate quantity is non-negative"""
        if value < 0:
            raise serializers.ValidationError("Quantity cannot be negative")
        return value

    def validate_min_threshold(self, value):
        if value < 0:
            raise serializers.ValidationError("Threshold cannot be negative")
        return value

    def validate_sku(self, value):
        return value or None

    def update(self, instance, validated_data):
        """Update fields, then record the stock difference"""
        user = self.context.get('user')
        new_quantity = validated_data.pop('quantity', instance.quantity)
        stock_diff = new_quantity - instance.quantity

        instance = super().update(instance, validated_data)

        if stock_diff > 0:
            instance.apply_movement(StockMovement.TYPE_IN, stock_diff, 'adjustment', user)
        elif stock_diff < 0:
            instance.apply_movement(StockMovement.TYPE_OUT, -stock_diff, 'adjustment', user)

        self.stock_diff = stock_diff
        return instance


class RestockSerializer(serializers.Serializer):
    """
    Serializer for restocking products
    """
    quantity_to_add = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=100, default="restock")

    def update(self, instance, validated_data):
        """Add quantity and log stock movement"""
        instance.apply_movement(
            StockMovement.TYPE_IN,
            validated_data['quantity_to_add'],
            validated_data.get('reason') or 'restock',
            self.context.get('user'),
        )
        return instance


class StockMovementSerializer(serializers.ModelSerializer):
    """
    Serializer for stock movements (audit journal rows)
    """
    product_name = serializers.CharField(source='product.name', read_only=True)
    unit_price = serializers.DecimalField(
        source='product.unit_price', max_digits=12, decimal_places=2, read_only=True
    )
    author = serializers.ReadOnlyField(source='author_name')
    signed_quantity = serializers.ReadOnlyField()
    value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = StockMovement
        fields = [
            'id', 'product', 'product_name', 'unit_price', 'type', 'quantity',
            'signed_quantity', 'value', 'reason', 'created_by', 'author',
            'created_at'
        ]
