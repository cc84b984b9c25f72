"""
Order transaction manager.

Every mutating operation runs inside a single ``transaction.atomic()`` block:
the order row and all of its item rows are written together or not at all.
The caller passes an ``Operator`` describing who acts; permissions are the
caller's concern and are not checked here.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from inventory import catalog
from .exceptions import (
    Conflict, InvalidStatus, NotFound, OrderError, PersistenceFailed,
    ReferenceNotFound, ValidationFailed,
)
from .models import Order, OrderItem, OrderStatus, STATUS_TRANSITIONS

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


@dataclass(frozen=True)
class LineItem:
    product_id: int
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class OrderCreated:
    order_id: int
    total: Decimal
    status: str


@dataclass(frozen=True)
class OrderUpdated:
    order_id: int
    total: Decimal
    status: str


@dataclass(frozen=True)
class StatusChanged:
    order_id: int
    previous: str
    status: str
    changed: bool


@dataclass(frozen=True)
class OrderDeleted:
    order_id: int


def _as_decimal(value):
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None


def validate_order_input(customer_name, items) -> List[str]:
    """Collect every client input problem so the form can show them together"""
    errors = []
    if not isinstance(customer_name, str) or not customer_name.strip():
        errors.append("Customer name is required")
    if not items:
        errors.append("An order must contain at least one item")
        return errors

    for index, item in enumerate(items, start=1):
        if isinstance(item.product_id, bool) or not isinstance(item.product_id, int) or item.product_id <= 0:
            errors.append(f"Item {index}: a valid product is required")
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity <= 0:
            errors.append(f"Item {index}: quantity must be greater than 0")
        price = _unit_price(item.unit_price)
        if price is None or price <= 0:
            errors.append(f"Item {index}: unit price must be greater than 0")
    return errors


def _unit_price(value):
    """Unit price rounded once to cents; the stored item and the total both use it"""
    price = _as_decimal(value)
    if price is None or not price.is_finite():
        return None
    return price.quantize(CENT)


def compute_total(items: Iterable[LineItem]) -> Decimal:
    total = Decimal('0.00')
    for item in items:
        total += _unit_price(item.unit_price) * item.quantity
    return total


def _clean_phone(phone):
    if phone is None:
        return None
    phone = str(phone).strip()
    return phone or None


def _parse_status(value):
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus(
            f"Unrecognised status '{value}'",
            details={'allowed': list(OrderStatus.values)},
        )


def _check_references(items, require_active):
    entries = catalog.lookup_many(item.product_id for item in items)
    unavailable = set()
    for item in items:
        entry = entries.get(item.product_id)
        if entry is None or (require_active and not entry.is_active):
            unavailable.add(item.product_id)
    if unavailable:
        raise ReferenceNotFound(unavailable)


def _lock_order(order_id):
    try:
        return Order.objects.select_for_update().get(pk=order_id)
    except Order.DoesNotExist:
        raise NotFound(f"Order {order_id} not found")


def _insert_items(order, items):
    OrderItem.objects.bulk_create([
        OrderItem(
            order=order,
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=_unit_price(item.unit_price),
        )
        for item in items
    ])


@contextmanager
def _atomic(action, order_id=None):
    try:
        with transaction.atomic():
            yield
    except OrderError as exc:
        logger.warning("Order %s %s rolled back: %s", action, order_id or '', exc.message)
        raise
    except DatabaseError as exc:
        logger.exception("Order %s %s failed in storage", action, order_id or '')
        raise PersistenceFailed(details={'action': action}) from exc


def create_order(customer_name, items, phone=None, operator=None) -> OrderCreated:
    items = list(items)
    errors = validate_order_input(customer_name, items)
    if errors:
        raise ValidationFailed(errors)

    total = compute_total(items)
    with _atomic('create'):
        # Products are verified inside the same transaction as the insert
        _check_references(items, require_active=True)
        order = Order.objects.create(
            customer_name=customer_name.strip(),
            phone=_clean_phone(phone),
            total=total,
            status=OrderStatus.PENDING,
            created_by_id=operator.user_id if operator else None,
        )
        _insert_items(order, items)

    logger.info("Order #%s created: %s items, total %s, by %s", order.id, len(items), total, operator)
    return OrderCreated(order_id=order.id, total=total, status=order.status)


def update_order(order_id, customer_name, items, phone=None, status=None, operator=None) -> OrderUpdated:
    """Replace the whole order: header fields, the full item set and the total"""
    items = list(items)
    errors = validate_order_input(customer_name, items)
    if errors:
        raise ValidationFailed(errors)
    new_status = _parse_status(status) if status is not None else None

    total = compute_total(items)
    with _atomic('update', order_id):
        order = _lock_order(order_id)
        if order.status == OrderStatus.DONE:
            raise Conflict("Completed orders cannot be modified")
        if new_status is not None and new_status != order.status and not order.can_transition_to(new_status):
            raise Conflict(
                f"Cannot change status from {order.status} to {new_status.value}",
                details={'from': order.status, 'to': new_status.value},
            )
        # Historical items may reference products that were deactivated since
        _check_references(items, require_active=False)

        order.items.all().delete()
        _insert_items(order, items)

        order.customer_name = customer_name.strip()
        order.phone = _clean_phone(phone)
        order.total = total
        if new_status is not None:
            order.status = new_status.value
        order.updated_at = timezone.now()
        order.save(update_fields=['customer_name', 'phone', 'total', 'status', 'updated_at'])

    logger.info("Order #%s updated: %s items, total %s, by %s", order.id, len(items), total, operator)
    return OrderUpdated(order_id=order.id, total=total, status=order.status)


def update_order_status(order_id, status, operator=None) -> StatusChanged:
    new_status = _parse_status(status)

    with _atomic('status', order_id):
        order = _lock_order(order_id)
        previous = order.status
        if new_status == previous:
            return StatusChanged(order_id=order.id, previous=previous, status=previous, changed=False)
        if not order.can_transition_to(new_status):
            allowed = sorted(s.value for s in STATUS_TRANSITIONS[OrderStatus(previous)])
            raise Conflict(
                f"Cannot change status from {previous} to {new_status.value}",
                details={'from': previous, 'to': new_status.value, 'allowed': allowed},
            )
        order.status = new_status.value
        order.updated_at = timezone.now()
        order.save(update_fields=['status', 'updated_at'])

    logger.info("Order #%s status %s -> %s by %s", order.id, previous, order.status, operator)
    return StatusChanged(order_id=order.id, previous=previous, status=order.status, changed=True)


def delete_order(order_id, operator=None) -> OrderDeleted:
    with _atomic('delete', order_id):
        order = _lock_order(order_id)
        if order.status == OrderStatus.DONE:
            raise Conflict("Cannot delete a completed order")
        # Items and payment go with the order (CASCADE)
        order.delete()

    logger.info("Order #%s deleted by %s", order_id, operator)
    return OrderDeleted(order_id=order_id)
