from django.conf import settings
from django.db import models
from inventory.models import Product
from decimal import Decimal

# Create your models here.


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    DONE = "done", "Done"
    CANCELLED = "cancelled", "Cancelled"


# Allowed lifecycle moves; done and cancelled are terminal
STATUS_TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.DONE, OrderStatus.CANCELLED}),
    OrderStatus.DONE: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Statuses whose totals count as recognised revenue
REVENUE_STATUSES = (OrderStatus.PROCESSING, OrderStatus.DONE)


class Order(models.Model):
    customer_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=30, null=True, blank=True)
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_orders',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    def can_transition_to(self, new_status):
        return new_status in STATUS_TRANSITIONS[OrderStatus(self.status)]

    def calculate_total(self):
        """Sum of unit_price * quantity over the persisted items"""
        total = Decimal('0.00')
        for item in self.items.all():
            total += item.line_total
        return total

    def __str__(self):
        return f"#{self.id} - {self.customer_name} - {self.status}"

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total__gte=0),
                name='orders_total_non_negative',
            ),
        ]


class OrderItem(models.Model):
    order = models.ForeignKey(Order, related_name='items', on_delete=models.CASCADE)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='order_items')
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def line_total(self):
        return self.unit_price * self.quantity

    def __str__(self):
        return f"{self.quantity} x {self.product_id} @ {self.unit_price}"

    class Meta:
        db_table = 'order_items'
        ordering = ['id']


class Payment(models.Model):
    PAYMENT_METHOD_CHOICES = (
        ("cash", "Cash"),
        ("card", "Card"),
        ("transfer", "Bank Transfer"),
    )

    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name='payment')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default="cash")
    paid_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments',
    )
    paid_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Payment for Order #{self.order_id} - {self.amount} ({self.payment_method})"

    class Meta:
        db_table = 'payments'
        ordering = ['-paid_at']
