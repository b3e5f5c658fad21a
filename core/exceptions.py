"""
core/exceptions.py

HTTP boundary for ``Failure`` values and the project-wide DRF exception handler.
Every error leaves the API as ``{"error": "<message>"}``.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .errors import ErrorCode, Failure

logger = logging.getLogger(__name__)


class ServiceError(APIException):
    """A rejected request, carrying the classified failure."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request could not be completed."
    default_code = "invalid"

    def __init__(self, failure: Failure):
        self.failure = failure
        if failure.code == ErrorCode.NOT_FOUND:
            self.status_code = status.HTTP_404_NOT_FOUND
        super().__init__(detail=failure.message, code=failure.code.value)

    @property
    def code(self) -> ErrorCode:
        return self.failure.code

    @classmethod
    def not_found(cls, resource: str, identifier) -> "ServiceError":
        return cls(Failure(ErrorCode.NOT_FOUND, f"{resource} {identifier} cannot be found.", resource))


def _flatten(detail):
    """Reduce DRF's nested error detail to one readable line."""
    if isinstance(detail, dict):
        return "; ".join(f"{key}: {_flatten(value)}" for key, value in detail.items())
    if isinstance(detail, (list, tuple)):
        return " ".join(_flatten(item) for item in detail)
    return str(detail)


def api_exception_handler(exc, context):
    view = context.get("view")
    view_name = view.__class__.__name__ if view else "-"

    if isinstance(exc, ServiceError):
        logger.warning(f"{view_name} rejected request ({exc.code.value}): {exc.failure.message}")
        return Response({"error": exc.failure.message}, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        data = response.data
        if isinstance(data, dict) and "detail" in data:
            data = data["detail"]
        message = _flatten(data)
        response.data = {"error": message}
        return response

    logger.exception(f"Unhandled error in {view_name}: {exc}")
    return Response(
        {"error": "An unexpected error occurred."},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
