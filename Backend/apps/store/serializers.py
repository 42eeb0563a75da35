from decimal import Decimal

from rest_framework import serializers
from .models import Products, StockMovements, Orders, OrderItems


class ProductSerializer(serializers.ModelSerializer):
    """
    Produto do catálogo. O preço só é exposto quando o contexto
    `prices_visible` permitir (portões de compra).
    """
    is_low_stock = serializers.BooleanField(read_only=True)
    is_out_of_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Products
        fields = [
            'id', 'name', 'description', 'category', 'price', 'stock_quantity',
            'minimum_stock', 'supplier', 'brand', 'prescription_required',
            'anvisa_required', 'is_active', 'is_low_stock', 'is_out_of_stock',
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not self.context.get('prices_visible', False):
            data['price'] = None
        return data


class ProductAdminSerializer(serializers.ModelSerializer):
    # Estoque inicial entra pelo ledger, nunca direto no produto
    initial_stock = serializers.IntegerField(write_only=True, required=False, min_value=0, default=0)

    class Meta:
        model = Products
        fields = [
            'id', 'name', 'description', 'category', 'price', 'cost_price',
            'stock_quantity', 'minimum_stock', 'max_stock', 'supplier', 'brand', 'sku',
            'prescription_required', 'anvisa_required', 'is_active',
            'created_at', 'updated_at', 'initial_stock',
        ]
        read_only_fields = ['id', 'stock_quantity', 'created_at', 'updated_at']

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("O preço não pode ser negativo.")
        return value

    def validate(self, attrs):
        # Depois de criado, estoque só muda por /stock/update/ ou /stock/adjust/
        if self.instance is not None and 'initial_stock' in self.initial_data:
            raise serializers.ValidationError({
                'initial_stock': "Estoque inicial só vale na criação. Use uma movimentação de estoque.",
            })
        return attrs


class StockMovementSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    delta = serializers.IntegerField(read_only=True)

    class Meta:
        model = StockMovements
        fields = [
            'id', 'product', 'product_name', 'type', 'quantity', 'delta',
            'previous_quantity', 'new_quantity', 'reason', 'reference', 'notes',
            'batch_number', 'expiration_date', 'cost_price', 'unit_value', 'total_value',
            'supplier', 'user', 'movement_date', 'created_at',
        ]
        read_only_fields = fields


# =============================================================================
# Payloads de entrada (validação de formato; regras ficam no StockLedger)
# =============================================================================

class StockUpdateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    type = serializers.ChoiceField(choices=StockMovements.Type.choices)
    quantity = serializers.IntegerField()
    reason = serializers.CharField(allow_blank=True, required=False, default='')
    reference = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    movement_date = serializers.DateTimeField(required=False, allow_null=True)

    # Lote e valores (opcionais)
    batch_number = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    expiration_date = serializers.DateField(required=False, allow_null=True)
    cost_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True)
    unit_value = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True)
    total_value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True)
    supplier = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=150)


class StockAdjustSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    new_quantity = serializers.IntegerField()
    reason = serializers.CharField(allow_blank=True, required=False, default='')
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class BulkStockAdjustSerializer(serializers.Serializer):
    updates = StockAdjustSerializer(many=True, allow_empty=False)


class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)


class PlaceOrderSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True, allow_empty=False)


class OrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = OrderItems
        fields = ['product', 'product_name', 'quantity', 'price_at_moment']


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    reference = serializers.CharField(read_only=True)

    class Meta:
        model = Orders
        fields = ['id', 'reference', 'total_amount', 'status', 'created_at', 'items']
