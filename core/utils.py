from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.response import Response
from rest_framework import status as http_status

from .exceptions import ValidationFailed


def success_response(message, data=None, status_code=http_status.HTTP_200_OK):
    payload = {"status": "success", "message": message}
    if data is not None:
        payload["data"] = data
    return Response(payload, status=status_code)


def error_response(message, errors=None, status_code=http_status.HTTP_400_BAD_REQUEST):
    payload = {"status": "error", "message": message}
    if errors is not None:
        payload["errors"] = errors
    return Response(payload, status=status_code)


def parse_positive_int(value, field_name):
    """Parse a query parameter that must be a positive integer"""
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed(
            f"{field_name} must be a positive integer",
            errors={field_name: ['A valid integer is required.']}
        )
    if number < 1:
        raise ValidationFailed(
            f"{field_name} must be a positive integer",
            errors={field_name: ['Ensure this value is greater than or equal to 1.']}
        )
    return number


def clean_or_fail(instance):
    """Run field validation (not uniqueness), raising ValidationFailed per field"""
    try:
        instance.full_clean(validate_unique=False)
    except DjangoValidationError as exc:
        raise ValidationFailed("Invalid input data provided", errors=exc.message_dict)
