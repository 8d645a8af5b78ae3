from rest_framework import serializers
from .models import Sale, SaleLine


class SaleLineSerializer(serializers.ModelSerializer):
    """
    Serializer for sale lines
    """
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = SaleLine
        fields = [
            'id', 'product', 'product_name', 'product_sku',
            'quantity', 'unit_price', 'total_price'
        ]


class SaleListSerializer(serializers.ModelSerializer):
    """
    Serializer for the sales history (one row per sale)
    """
    item_count = serializers.ReadOnlyField()
    products = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            'id', 'reference', 'transaction_number', 'seller', 'seller_name',
            'item_count', 'products', 'total_amount', 'created_at'
        ]

    def get_products(self, obj):
        return [line.product_name for line in obj.lines.all()]


class SaleDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for detailed sale view
    """
    lines = SaleLineSerializer(many=True, read_only=True)
    item_count = serializers.ReadOnlyField()

    class Meta:
        model = Sale
        fields = [
            'id', 'reference', 'transaction_number', 'seller', 'seller_name',
            'item_count', 'total_amount', 'created_at', 'lines'
        ]
