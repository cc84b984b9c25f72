"""
Sales reporting computed straight from order history.

Nothing is cached or rolled up: every call runs fresh aggregate queries over
``Order`` and ``OrderItem`` rows. Only revenue-eligible orders (processing or
done) contribute revenue; order counts include every order in the window.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from django.conf import settings
from django.db.models import Count, DecimalField, ExpressionWrapper, F, Q, Sum
from django.db.models.functions import ExtractHour, ExtractMonth, TruncDate

from orders import ledger
from orders.models import Order, OrderItem, OrderStatus, REVENUE_STATUSES
from .periods import DateRange, TODAY, YEAR, normalize_period, resolve_period

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
ZERO = Decimal('0.00')
MAX_TOP_PRODUCTS = 100


@dataclass(frozen=True)
class PeriodSummary:
    total_orders: int
    completed_orders: int
    total_revenue: Decimal
    avg_order_value: Decimal
    success_rate: Decimal

    @property
    def exact_average(self):
        if not self.total_orders:
            return ZERO
        return self.total_revenue / self.total_orders

    @property
    def exact_success_rate(self):
        if not self.total_orders:
            return ZERO
        return Decimal(self.completed_orders * 100) / self.total_orders


@dataclass(frozen=True)
class GrowthRates:
    revenue: Decimal
    orders: Decimal
    avg_order_value: Decimal
    success_rate: Decimal


@dataclass(frozen=True)
class ChartSeries:
    labels: List[str]
    revenues: List[Decimal]
    orders: List[int]


@dataclass(frozen=True)
class TableRow:
    date: str
    total_orders: int
    revenue: Decimal
    avg_order: Decimal
    completed: int
    cancelled: int


@dataclass(frozen=True)
class ProductSales:
    product_id: int
    name: str
    category: str
    price: Decimal
    order_count: int
    total_quantity: int
    total_revenue: Decimal


@dataclass(frozen=True)
class SalesReport:
    period: str
    current: DateRange
    previous: DateRange
    summary: PeriodSummary
    growth: GrowthRates
    chart: ChartSeries
    table: List[TableRow]


@dataclass(frozen=True)
class DashboardSummary:
    period: str
    summary: PeriodSummary
    unique_customers: int
    pending_orders: int
    processing_orders: int
    completed_orders: int
    cancelled_orders: int
    collected: Decimal


def _orders_in(date_range: DateRange):
    return Order.objects.filter(created_at__gte=date_range.start, created_at__lt=date_range.end)


def _revenue_filter(prefix=''):
    return Q(**{f'{prefix}status__in': REVENUE_STATUSES})


def _money(value):
    return (value or ZERO).quantize(CENT)


def _average(revenue, count):
    # Spread over every order in the window, not only paying ones
    if not count:
        return ZERO
    return (revenue / count).quantize(CENT)


def period_summary(date_range: DateRange) -> PeriodSummary:
    totals = _orders_in(date_range).aggregate(
        total_orders=Count('id'),
        total_revenue=Sum('total', filter=_revenue_filter()),
        completed=Count('id', filter=Q(status=OrderStatus.DONE)),
    )
    total_orders = totals['total_orders']
    completed = totals['completed']
    revenue = _money(totals['total_revenue'])

    if total_orders:
        success_rate = (Decimal(completed * 100) / total_orders).quantize(CENT)
    else:
        success_rate = ZERO

    return PeriodSummary(
        total_orders=total_orders,
        completed_orders=completed,
        total_revenue=revenue,
        avg_order_value=_average(revenue, total_orders),
        success_rate=success_rate,
    )


def growth_rate(current, previous) -> Decimal:
    """Percentage change rounded to one decimal; 0 whenever previous is 0"""
    current = Decimal(str(current))
    previous = Decimal(str(previous))
    if previous == 0:
        return Decimal('0.0')
    return round((current - previous) / previous * 100, 1)


def compare_periods(current: PeriodSummary, previous: PeriodSummary) -> GrowthRates:
    # Ratios are compared unrounded; only the displayed values are rounded
    return GrowthRates(
        revenue=growth_rate(current.total_revenue, previous.total_revenue),
        orders=growth_rate(current.total_orders, previous.total_orders),
        avg_order_value=growth_rate(current.exact_average, previous.exact_average),
        success_rate=growth_rate(current.exact_success_rate, previous.exact_success_rate),
    )


def _chart_bucket(period):
    if period == TODAY:
        return ExtractHour('created_at')
    if period == YEAR:
        return ExtractMonth('created_at')
    return TruncDate('created_at')


def _chart_label(period, key):
    if period == TODAY:
        return f"{key}:00"
    if period == YEAR:
        return f"T{key}"
    return key.strftime('%d/%m')


def chart_series(date_range: DateRange, period: str) -> ChartSeries:
    """Revenue and order counts per hour, day or month, oldest bucket first"""
    period = normalize_period(period)
    rows = (
        _orders_in(date_range)
        .filter(_revenue_filter())
        .annotate(bucket=_chart_bucket(period))
        .values('bucket')
        .annotate(order_count=Count('id'), revenue=Sum('total'))
        .order_by('bucket')
    )

    labels, revenues, orders = [], [], []
    for row in rows:
        labels.append(_chart_label(period, row['bucket']))
        revenues.append(_money(row['revenue']))
        orders.append(row['order_count'])
    return ChartSeries(labels=labels, revenues=revenues, orders=orders)


def table_rows(date_range: DateRange, period: str) -> List[TableRow]:
    """Per day (per month for a year) breakdown of all orders, newest first"""
    period = normalize_period(period)
    bucket = ExtractMonth('created_at') if period == YEAR else TruncDate('created_at')
    rows = (
        _orders_in(date_range)
        .annotate(bucket=bucket)
        .values('bucket')
        .annotate(
            total_orders=Count('id'),
            revenue=Sum('total', filter=_revenue_filter()),
            completed=Count('id', filter=Q(status=OrderStatus.DONE)),
            cancelled=Count('id', filter=Q(status=OrderStatus.CANCELLED)),
        )
        .order_by('-bucket')
    )

    table = []
    for row in rows:
        if period == YEAR:
            label = f"Tháng {row['bucket']}"
        else:
            label = row['bucket'].strftime('%d/%m/%Y')
        revenue = _money(row['revenue'])
        table.append(TableRow(
            date=label,
            total_orders=row['total_orders'],
            revenue=revenue,
            avg_order=_average(revenue, row['total_orders']),
            completed=row['completed'],
            cancelled=row['cancelled'],
        ))
    return table


def _clamp_limit(limit):
    default = getattr(settings, 'REPORT_TOP_PRODUCTS_LIMIT', 10)
    if limit is None or limit <= 0:
        return default
    return min(limit, MAX_TOP_PRODUCTS)


def top_products(date_range: DateRange, limit: Optional[int] = None) -> List[ProductSales]:
    """Best sellers by revenue; ties keep whatever order the database returns"""
    line_total = ExpressionWrapper(
        F('quantity') * F('unit_price'),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )
    rows = (
        OrderItem.objects.filter(
            order__created_at__gte=date_range.start,
            order__created_at__lt=date_range.end,
        )
        .filter(_revenue_filter('order__'))
        .values('product_id', 'product__name', 'product__category', 'product__price')
        .annotate(
            order_count=Count('order_id', distinct=True),
            total_quantity=Sum('quantity'),
            total_revenue=Sum(line_total),
        )
        .order_by('-total_revenue')[:_clamp_limit(limit)]
    )

    return [
        ProductSales(
            product_id=row['product_id'],
            name=row['product__name'],
            category=row['product__category'] or "Khác",
            price=_money(row['product__price']),
            order_count=row['order_count'],
            total_quantity=row['total_quantity'],
            total_revenue=_money(row['total_revenue']),
        )
        for row in rows
    ]


def build_report(period, now=None) -> SalesReport:
    window = resolve_period(period, now)
    current = period_summary(window.current)
    previous = period_summary(window.previous)

    report = SalesReport(
        period=window.period,
        current=window.current,
        previous=window.previous,
        summary=current,
        growth=compare_periods(current, previous),
        chart=chart_series(window.current, window.period),
        table=table_rows(window.current, window.period),
    )
    logger.debug(
        "Report %s: %s orders, revenue %s",
        window.period, current.total_orders, current.total_revenue,
    )
    return report


def build_summary(period, now=None) -> DashboardSummary:
    window = resolve_period(period, now)
    orders = _orders_in(window.current)
    counts = orders.aggregate(
        unique_customers=Count('customer_name', distinct=True),
        pending=Count('id', filter=Q(status=OrderStatus.PENDING)),
        processing=Count('id', filter=Q(status=OrderStatus.PROCESSING)),
        completed=Count('id', filter=Q(status=OrderStatus.DONE)),
        cancelled=Count('id', filter=Q(status=OrderStatus.CANCELLED)),
    )
    paid = ledger.revenue_for(orders.values_list('id', flat=True))

    return DashboardSummary(
        period=window.period,
        summary=period_summary(window.current),
        unique_customers=counts['unique_customers'],
        pending_orders=counts['pending'],
        processing_orders=counts['processing'],
        completed_orders=counts['completed'],
        cancelled_orders=counts['cancelled'],
        collected=_money(sum(paid.values(), ZERO)),
    )
