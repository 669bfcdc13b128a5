"""
API error shaping

Every error response carries a human readable `message`:
- validation errors name the first offending field and keep the full
  DRF error dict under `errors`
- protected deletes become 400 reference errors
- anything unhandled (database failures included) becomes a 500 that
  surfaces the underlying message and is logged with its traceback
"""
import logging

from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def first_error_message(detail):
    """Flatten a DRF error structure down to its first message"""
    if isinstance(detail, dict):
        for field, errors in detail.items():
            message = first_error_message(errors)
            if field in ('non_field_errors', 'detail'):
                return message
            return f"{field}: {message}"
        return 'Invalid request'
    if isinstance(detail, (list, tuple)):
        return first_error_message(detail[0]) if detail else 'Invalid request'
    return str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        if isinstance(exc, ProtectedError):
            return Response({
                'message': 'Record is still referenced by other records; delete those first',
                'error': str(exc.args[0]) if exc.args else str(exc),
            }, status=status.HTTP_400_BAD_REQUEST)

        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
        return Response({
            'message': 'Server error',
            'error': str(exc),
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        response.data = {
            'message': first_error_message(response.data),
            'errors': response.data,
        }
    elif isinstance(response.data, dict) and 'detail' in response.data:
        data = dict(response.data)
        data['message'] = str(data.pop('detail'))
        response.data = data

    return response
