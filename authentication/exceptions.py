# exceptions.py
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.db.models import ProtectedError
import logging
from django.conf import settings

from orders.exceptions import OrderError

logger = logging.getLogger(__name__)


def _error_response(message, code, details, status_code):
    return Response({
        'error': True,
        'code': code,
        'message': message,
        'details': details,
        'status_code': status_code
    }, status=status_code)


def custom_exception_handler(exc, context):
    """
    Custom exception handler for the cafe API
    """
    # Order manager errors carry their own code and HTTP status
    if isinstance(exc, OrderError):
        if exc.status_code >= 500:
            logger.error(f"Order Error: {exc.code}: {exc.message}")
        return _error_response(exc.message, exc.code, exc.details, exc.status_code)

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        message = 'An error occurred'
        code = 'error'

        # Handle specific error types
        if response.status_code == 400:
            message, code = 'Validation error', 'validation_failed'
        elif response.status_code == 401:
            message, code = 'Authentication required', 'not_authenticated'
        elif response.status_code == 403:
            message, code = 'Permission denied', 'permission_denied'
        elif response.status_code == 404:
            message, code = 'Resource not found', 'not_found'
        elif response.status_code == 405:
            message, code = 'Method not allowed', 'method_not_allowed'

        response.data = {
            'error': True,
            'code': code,
            'message': message,
            'details': response.data,
            'status_code': response.status_code
        }
        return response

    # Handle Django ValidationError
    if isinstance(exc, ValidationError):
        logger.error(f"Validation Error: {exc}")
        return _error_response(
            'Validation error', 'validation_failed',
            {'non_field_errors': exc.messages}, status.HTTP_400_BAD_REQUEST,
        )

    # Products referenced by past orders cannot be deleted
    if isinstance(exc, ProtectedError):
        logger.warning(f"Protected delete refused: {exc}")
        return _error_response(
            'Resource is referenced by existing orders', 'conflict',
            {'error': 'This record is used by order history and cannot be deleted'},
            status.HTTP_409_CONFLICT,
        )

    # Handle Django IntegrityError
    if isinstance(exc, IntegrityError):
        logger.error(f"Integrity Error: {exc}")
        return _error_response(
            'Database integrity error', 'persistence_failed',
            {'error': 'This operation violates database constraints'},
            status.HTTP_400_BAD_REQUEST,
        )

    # Handle unexpected errors
    logger.exception(f"Unexpected Error: {exc}")
    return _error_response(
        'An unexpected error occurred', 'server_error',
        {'error': str(exc)} if settings.DEBUG else {},
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
