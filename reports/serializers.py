from rest_framework import serializers


def _money():
    return serializers.DecimalField(max_digits=14, decimal_places=2, coerce_to_string=False)


class DateRangeSerializer(serializers.Serializer):
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()


class PeriodSummarySerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    completed_orders = serializers.IntegerField()
    total_revenue = _money()
    avg_order_value = _money()
    success_rate = serializers.DecimalField(max_digits=5, decimal_places=2, coerce_to_string=False)


class GrowthRatesSerializer(serializers.Serializer):
    # Percentages can be arbitrarily large, so they go out as plain floats
    revenue = serializers.FloatField()
    orders = serializers.FloatField()
    avg_order_value = serializers.FloatField()
    success_rate = serializers.FloatField()


class ChartSeriesSerializer(serializers.Serializer):
    labels = serializers.ListField(child=serializers.CharField())
    revenues = serializers.ListField(child=_money())
    orders = serializers.ListField(child=serializers.IntegerField())


class TableRowSerializer(serializers.Serializer):
    date = serializers.CharField()
    total_orders = serializers.IntegerField()
    revenue = _money()
    avg_order = _money()
    completed = serializers.IntegerField()
    cancelled = serializers.IntegerField()


class SalesReportSerializer(serializers.Serializer):
    period = serializers.CharField()
    current = DateRangeSerializer()
    previous = DateRangeSerializer()
    summary = PeriodSummarySerializer()
    growth = GrowthRatesSerializer()
    chart = ChartSeriesSerializer()
    table = TableRowSerializer(many=True)


class ProductSalesSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    name = serializers.CharField()
    category = serializers.CharField()
    price = _money()
    order_count = serializers.IntegerField()
    total_quantity = serializers.IntegerField()
    total_revenue = _money()


class DashboardSummarySerializer(serializers.Serializer):
    period = serializers.CharField()
    summary = PeriodSummarySerializer()
    unique_customers = serializers.IntegerField()
    pending_orders = serializers.IntegerField()
    processing_orders = serializers.IntegerField()
    completed_orders = serializers.IntegerField()
    cancelled_orders = serializers.IntegerField()
    collected = _money()
