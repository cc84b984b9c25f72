"""
Error kinds raised by the order manager and payment ledger.

Each kind carries its own ``code`` and ``status_code`` so the API layer can
render it without guessing, and callers can tell a bad form (re-show it)
from a storage fault (safe to retry).
"""
from rest_framework import status


class OrderError(Exception):
    code = 'error'
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Order operation failed'

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class ValidationFailed(OrderError):
    code = 'validation_failed'
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid order data'

    def __init__(self, errors, message=None):
        self.errors = list(errors)
        super().__init__(message or ', '.join(self.errors), details={'errors': self.errors})


class ReferenceNotFound(OrderError):
    code = 'reference_not_found'
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = 'Referenced product does not exist or is inactive'

    def __init__(self, product_ids, message=None):
        self.product_ids = sorted(product_ids)
        super().__init__(
            message or f"Products not available: {', '.join(str(pk) for pk in self.product_ids)}",
            details={'product_ids': self.product_ids},
        )


class NotFound(OrderError):
    code = 'not_found'
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Order not found'


class Conflict(OrderError):
    code = 'conflict'
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Operation conflicts with the order lifecycle'


class InvalidStatus(OrderError):
    code = 'invalid_status'
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Unrecognised order status'


class PersistenceFailed(OrderError):
    code = 'persistence_failed'
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = 'Could not save changes, please retry'
