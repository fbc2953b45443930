"""
Error taxonomy for the API and the DRF exception handler that renders it.

Unauthenticated, Forbidden, NotFound and ValidationFailed map onto DRF's own
NotAuthenticated, PermissionDenied, NotFound and ValidationError. Conflict and
InternalError are added here. Every error body has the shape
``{"error": "<message>"}``; validation errors also carry ``details``
(field -> list of messages).
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'conflict'


class InternalError(APIException):
    """Persistence or logging failure. Never carries internals to the caller."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal server error.'
    default_code = 'internal'


def tracker_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}",
            exc_info=exc,
        )
        set_rollback()
        return Response(
            {'error': InternalError.default_detail},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        response.data = {'error': 'Validation failed', 'details': response.data}
        return response

    if isinstance(exc, InternalError):
        logger.error(f"Internal error: {exc.detail}", exc_info=exc.__cause__ or exc)
        response.data = {'error': InternalError.default_detail}
        return response

    detail = response.data.get('detail', response.data) if isinstance(response.data, dict) else response.data
    response.data = {'error': str(detail)}
    return response
