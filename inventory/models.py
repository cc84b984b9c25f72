from django.db import models
from decimal import Decimal


class Product(models.Model):
    name = models.CharField(max_length=150)
    category = models.CharField(max_length=80, default="Đồ uống")
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    description = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'products'
        ordering = ['name']
