import logging

from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.views import exception_handler as drf_exception_handler

from .exceptions import (
    AlreadyProcessed,
    BloodBankError,
    CapacityExceeded,
    Conflict,
    DuplicateKey,
    FulfillmentFailed,
    InsufficientStock,
    NotFound,
    ValidationFailed,
)
from .utils import error_response

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    NotFound: status.HTTP_404_NOT_FOUND,
    ValidationFailed: status.HTTP_400_BAD_REQUEST,
    DuplicateKey: status.HTTP_400_BAD_REQUEST,
    Conflict: status.HTTP_400_BAD_REQUEST,
    CapacityExceeded: status.HTTP_400_BAD_REQUEST,
    InsufficientStock: status.HTTP_400_BAD_REQUEST,
    AlreadyProcessed: status.HTTP_400_BAD_REQUEST,
    FulfillmentFailed: status.HTTP_400_BAD_REQUEST,
}


def status_code_for(exc):
    """Look up the HTTP status for a business error, walking its class hierarchy"""
    for klass in type(exc).__mro__:
        if klass in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[klass]
    return status.HTTP_400_BAD_REQUEST


def exception_handler(exc, context):
    """Map every exception raised by a view to the common response envelope"""
    if isinstance(exc, BloodBankError):
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        return error_response(exc.message, errors=exc.errors, status_code=status_code_for(exc))

    if isinstance(exc, drf_exceptions.ValidationError):
        logger.warning("Validation error: %s", exc.detail)
        return error_response(
            "Invalid input data provided",
            errors=exc.detail,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, (Http404, drf_exceptions.NotFound)):
        return error_response("Resource not found", status_code=status.HTTP_404_NOT_FOUND)

    response = drf_exception_handler(exc, context)
    if response is not None:
        detail = response.data.get('detail', response.data) if isinstance(response.data, dict) else response.data
        return error_response(str(detail), status_code=response.status_code)

    logger.exception("Unexpected error while handling %s", context.get('view').__class__.__name__)
    return error_response(
        "An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
