from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from orders import services
from orders.exceptions import (
    Conflict, InvalidStatus, NotFound, PersistenceFailed, ReferenceNotFound, ValidationFailed,
)
from orders.models import Order, OrderItem, OrderStatus
from orders.services import LineItem

pytestmark = pytest.mark.django_db


def test_create_order_computes_total_from_lines(coffee, tea, operator):
    result = services.create_order(
        'Anh Tuấn',
        [LineItem(coffee.id, 2, Decimal('25000')), LineItem(tea.id, 1, Decimal('15000'))],
        phone=' 0901234567 ',
        operator=operator,
    )

    order = Order.objects.get(pk=result.order_id)
    assert result.total == Decimal('65000.00')
    assert result.status == OrderStatus.PENDING
    assert order.total == Decimal('65000.00')
    assert order.calculate_total() == order.total
    assert order.phone == '0901234567'
    assert order.created_by_id == operator.user_id
    assert order.items.count() == 2


def test_create_order_keeps_client_unit_price(coffee):
    result = services.create_order('Chị Lan', [LineItem(coffee.id, 3, Decimal('20000'))])

    item = OrderItem.objects.get(order_id=result.order_id)
    assert item.unit_price == Decimal('20000.00')
    assert result.total == Decimal('60000.00')


def test_compute_total_rounds_each_unit_price_once():
    total = services.compute_total([LineItem(1, 3, Decimal('0.335'))])
    assert total == Decimal('1.02')


def test_sub_cent_prices_keep_total_equal_to_stored_lines(coffee):
    result = services.create_order('Khách lẻ', [LineItem(coffee.id, 3, Decimal('0.335'))])

    order = Order.objects.get(pk=result.order_id)
    assert order.items.get().unit_price == Decimal('0.34')
    assert order.total == Decimal('1.02')
    assert order.total == order.calculate_total()


def test_price_rounding_to_zero_is_rejected(coffee):
    with pytest.raises(ValidationFailed):
        services.create_order('Khách lẻ', [LineItem(coffee.id, 1, Decimal('0.004'))])


def test_create_order_with_unknown_product_persists_nothing(coffee):
    with pytest.raises(ReferenceNotFound) as excinfo:
        services.create_order(
            'Khách lẻ',
            [LineItem(coffee.id, 1, Decimal('25000')), LineItem(9999, 1, Decimal('10000'))],
        )

    assert excinfo.value.product_ids == [9999]
    assert Order.objects.count() == 0
    assert OrderItem.objects.count() == 0


def test_create_order_rejects_inactive_product(retired):
    with pytest.raises(ReferenceNotFound):
        services.create_order('Khách lẻ', [LineItem(retired.id, 1, Decimal('29000'))])
    assert Order.objects.count() == 0


def test_validation_collects_every_problem():
    with pytest.raises(ValidationFailed) as excinfo:
        services.create_order('   ', [])

    assert excinfo.value.errors == [
        "Customer name is required",
        "An order must contain at least one item",
    ]


def test_validation_reports_bad_lines(coffee):
    with pytest.raises(ValidationFailed) as excinfo:
        services.create_order('Khách lẻ', [LineItem(coffee.id, 0, Decimal('-1'))])

    assert len(excinfo.value.errors) == 2
    assert excinfo.value.details == {'errors': excinfo.value.errors}


def test_storage_failure_becomes_persistence_failed(coffee):
    with mock.patch.object(OrderItem.objects, 'bulk_create', side_effect=DatabaseError('disk full')):
        with pytest.raises(PersistenceFailed):
            services.create_order('Khách lẻ', [LineItem(coffee.id, 1, Decimal('25000'))])

    assert Order.objects.count() == 0


def test_update_replaces_every_item(place_order, coffee, tea):
    order = place_order([(coffee, 2, '25000')])

    result = services.update_order(order.id, 'Anh Tuấn', [LineItem(tea.id, 3, Decimal('35000'))])

    order.refresh_from_db()
    items = list(order.items.all())
    assert [(item.product_id, item.quantity) for item in items] == [(tea.id, 3)]
    assert result.total == Decimal('105000.00')
    assert order.total == Decimal('105000.00')
    assert order.customer_name == 'Anh Tuấn'
    assert order.updated_at is not None


def test_update_accepts_products_deactivated_since(place_order, coffee, retired):
    order = place_order([(coffee, 1, '25000')])

    result = services.update_order(order.id, 'Khách lẻ', [LineItem(retired.id, 1, Decimal('29000'))])

    assert result.total == Decimal('29000.00')


def test_update_with_missing_product_keeps_old_items(place_order, coffee):
    order = place_order([(coffee, 2, '25000')])

    with pytest.raises(ReferenceNotFound):
        services.update_order(order.id, 'Khách lẻ', [LineItem(4242, 1, Decimal('1000'))])

    order.refresh_from_db()
    assert order.items.count() == 1
    assert order.total == Decimal('50000.00')


def test_update_completed_order_conflicts(place_order, coffee):
    order = place_order([(coffee, 1, '25000')], status=OrderStatus.DONE)

    with pytest.raises(Conflict):
        services.update_order(order.id, 'Khách lẻ', [LineItem(coffee.id, 5, Decimal('25000'))])


def test_update_with_illegal_status_rolls_back(place_order, coffee, tea):
    order = place_order([(coffee, 1, '25000')])

    with pytest.raises(Conflict):
        services.update_order(
            order.id, 'Khách lẻ', [LineItem(tea.id, 1, Decimal('35000'))], status='done',
        )

    order.refresh_from_db()
    assert order.status == OrderStatus.PENDING
    assert list(order.items.values_list('product_id', flat=True)) == [coffee.id]


def test_update_missing_order(coffee):
    with pytest.raises(NotFound):
        services.update_order(12345, 'Khách lẻ', [LineItem(coffee.id, 1, Decimal('25000'))])


@pytest.mark.parametrize('status', [OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.CANCELLED])
def test_delete_removes_order_and_items(place_order, coffee, status):
    order = place_order([(coffee, 2, '25000')], status=status)

    result = services.delete_order(order.id)

    assert result.order_id == order.id
    assert not Order.objects.filter(pk=order.id).exists()
    assert OrderItem.objects.count() == 0


def test_delete_completed_order_conflicts(place_order, coffee):
    order = place_order([(coffee, 2, '25000')], status=OrderStatus.DONE)

    with pytest.raises(Conflict):
        services.delete_order(order.id)

    assert Order.objects.filter(pk=order.id).exists()
    assert OrderItem.objects.filter(order_id=order.id).count() == 1


def test_delete_missing_order():
    with pytest.raises(NotFound):
        services.delete_order(777)


def test_status_walks_the_lifecycle(place_order, coffee):
    order = place_order([(coffee, 1, '25000')])

    first = services.update_order_status(order.id, 'processing')
    second = services.update_order_status(order.id, 'done')

    assert (first.previous, first.status, first.changed) == ('pending', 'processing', True)
    assert (second.previous, second.status) == ('processing', 'done')
    order.refresh_from_db()
    assert order.status == OrderStatus.DONE


def test_same_status_is_a_no_op(place_order, coffee):
    order = place_order([(coffee, 1, '25000')], status=OrderStatus.DONE)

    result = services.update_order_status(order.id, 'done')

    assert result.changed is False
    order.refresh_from_db()
    assert order.updated_at is None


@pytest.mark.parametrize('current, requested', [
    (OrderStatus.DONE, 'pending'),
    (OrderStatus.DONE, 'cancelled'),
    (OrderStatus.CANCELLED, 'processing'),
    (OrderStatus.PENDING, 'done'),
])
def test_illegal_transitions_conflict(place_order, coffee, current, requested):
    order = place_order([(coffee, 1, '25000')], status=current)

    with pytest.raises(Conflict):
        services.update_order_status(order.id, requested)

    order.refresh_from_db()
    assert order.status == current


def test_unknown_status_is_rejected(place_order, coffee):
    order = place_order([(coffee, 1, '25000')])

    with pytest.raises(InvalidStatus) as excinfo:
        services.update_order_status(order.id, 'shipped')

    assert 'pending' in excinfo.value.details['allowed']


def test_status_of_missing_order():
    with pytest.raises(NotFound):
        services.update_order_status(31337, 'processing')
