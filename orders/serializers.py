from rest_framework import serializers
from .models import Order, OrderItem, Payment
from .services import LineItem


class OrderItemInputSerializer(serializers.Serializer):
    """Shape of one submitted line; range checks are left to the order manager"""
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)


class OrderWriteSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=100, allow_blank=True, trim_whitespace=False)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True, allow_null=True)
    status = serializers.CharField(required=False, allow_null=True)
    items = OrderItemInputSerializer(many=True, allow_empty=True)

    def line_items(self):
        return [
            LineItem(
                product_id=item['product_id'],
                quantity=item['quantity'],
                unit_price=item['unit_price'],
            )
            for item in self.validated_data['items']
        ]


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()


class OrderItemReadSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'product_id', 'product_name', 'quantity', 'unit_price', 'line_total']


class OrderListSerializer(serializers.ModelSerializer):
    item_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'customer_name', 'phone', 'total', 'status',
            'created_at', 'updated_at', 'item_count'
        ]


class OrderReadSerializer(serializers.ModelSerializer):
    items = OrderItemReadSerializer(many=True, read_only=True)
    created_by = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'customer_name', 'phone', 'total', 'status', 'created_by',
            'created_at', 'updated_at', 'items'
        ]

    def get_created_by(self, obj):
        return obj.created_by.get_username() if obj.created_by else None


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ['id', 'order', 'amount', 'payment_method', 'paid_by', 'paid_at']
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_method = serializers.CharField(default="cash")
