from decimal import Decimal

import pytest
from django.contrib.auth.models import Group, User
from rest_framework.test import APIClient

from authentication.context import Operator
from inventory.models import Product
from orders import services
from orders.models import Order
from orders.services import LineItem


@pytest.fixture
def staff_user(db):
    user = User.objects.create_user(username='barista', password='secret')
    user.groups.add(Group.objects.create(name='staff'))
    return user


@pytest.fixture
def operator(staff_user):
    return Operator.from_user(staff_user)


@pytest.fixture
def api_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def coffee(db):
    return Product.objects.create(name='Cà phê sữa', category='Cà phê', price=Decimal('25000.00'))


@pytest.fixture
def tea(db):
    return Product.objects.create(name='Trà đào', category='Trà', price=Decimal('35000.00'))


@pytest.fixture
def retired(db):
    return Product.objects.create(
        name='Bạc xỉu', category='Cà phê', price=Decimal('29000.00'), is_active=False,
    )


@pytest.fixture
def place_order(db, operator):
    """
    Create an order through the order manager, then force its status and
    creation time so report windows can be exercised deterministically.
    """
    def _place(items, customer_name='Khách lẻ', status=None, created_at=None):
        lines = [LineItem(product.id, quantity, Decimal(price)) for product, quantity, price in items]
        result = services.create_order(customer_name, lines, operator=operator)
        changes = {}
        if status is not None:
            changes['status'] = status
        if created_at is not None:
            changes['created_at'] = created_at
        if changes:
            Order.objects.filter(pk=result.order_id).update(**changes)
        return Order.objects.get(pk=result.order_id)

    return _place
