import logging
from decimal import Decimal
from typing import Dict, Iterable

from django.db import IntegrityError, transaction

from .exceptions import Conflict, NotFound, ValidationFailed
from .models import Order, Payment

logger = logging.getLogger(__name__)


def record_payment(order_id, amount, payment_method="cash", operator=None) -> Payment:
    """Attach the single payment an order may have"""
    errors = []
    if not isinstance(amount, Decimal) or not amount.is_finite() or amount <= 0:
        errors.append("Payment amount must be greater than 0")
    if payment_method not in dict(Payment.PAYMENT_METHOD_CHOICES):
        errors.append(f"Unknown payment method '{payment_method}'")
    if errors:
        raise ValidationFailed(errors)

    try:
        with transaction.atomic():
            if not Order.objects.filter(pk=order_id).exists():
                raise NotFound(f"Order {order_id} not found")
            if Payment.objects.filter(order_id=order_id).exists():
                raise Conflict(f"Order {order_id} already has a payment")
            payment = Payment.objects.create(
                order_id=order_id,
                amount=amount,
                payment_method=payment_method,
                paid_by_id=operator.user_id if operator else None,
            )
    except IntegrityError:
        # Lost a race with another payment for the same order
        raise Conflict(f"Order {order_id} already has a payment")

    logger.info("Payment of %s recorded for order #%s by %s", amount, order_id, operator)
    return payment


def revenue_for(order_ids: Iterable[int]) -> Dict[int, Decimal]:
    """Map order id -> paid amount for those orders that have a payment"""
    ids = list(order_ids)
    if not ids:
        return {}
    return dict(
        Payment.objects.filter(order_id__in=ids).values_list('order_id', 'amount')
    )
