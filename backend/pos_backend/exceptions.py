"""
Shared error envelope for every API response.

Service layers raise `ServiceError` subclasses that carry an HTTP status and a
machine-readable code. Views either translate them directly or let them reach
`structured_exception_handler`, which renders the same
`{"success": false, "message": ..., "code": ...}` body for DRF errors and for
anything unexpected.
"""
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class ServiceError(Exception):
    """Base class for domain errors that map onto an HTTP status."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_request"
    default_message = "The request could not be processed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


def error_response(message, status_code, code=None, **extra):
    body = {"success": False, "message": message}
    if code:
        body["code"] = code
    body.update(extra)
    return Response(body, status=status_code)


def service_error_response(exc: ServiceError):
    return error_response(exc.message, exc.status_code, code=exc.code)


def _flatten_validation_detail(detail):
    """Pick the first readable message out of a DRF validation payload."""
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _flatten_validation_detail(value)
            if field == "non_field_errors":
                return message
            return f"{field}: {message}"
    if isinstance(detail, (list, tuple)) and detail:
        return _flatten_validation_detail(detail[0])
    return str(detail)


def structured_exception_handler(exc, context):
    if isinstance(exc, ServiceError):
        logger.warning(f"{exc.__class__.__name__}: {exc.message}")
        return service_error_response(exc)

    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            return error_response(
                _flatten_validation_detail(exc.detail),
                response.status_code,
                code="validation_error",
                errors=exc.detail,
            )
        if isinstance(exc, Http404):
            return error_response("Not found.", status.HTTP_404_NOT_FOUND, code="not_found")
        if isinstance(exc, PermissionDenied):
            return error_response(
                "You do not have permission to perform this action.",
                status.HTTP_403_FORBIDDEN,
                code="permission_denied",
            )
        if isinstance(exc, APIException):
            return error_response(
                _flatten_validation_detail(exc.detail),
                response.status_code,
                code=exc.get_codes() if isinstance(exc.get_codes(), str) else None,
            )
        return response

    view = context.get("view")
    logger.error(
        f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
        exc_info=True,
    )
    return error_response(
        GENERIC_ERROR_MESSAGE,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="internal_error",
    )
