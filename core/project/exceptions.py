"""
Error taxonomy shared by the service layer and the API boundary.

Services raise these exceptions; views let them propagate. The DRF exception
handler below renders every failure as ``{"message": "..."}`` so clients get
a single error shape regardless of where the request failed.
"""

import logging

from django.http import JsonResponse
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


class ValidationError(exceptions.APIException):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "invalid"


class AuthError(exceptions.NotAuthenticated):
    """No resolved identity on the request."""

    default_detail = "User not authenticated"


class AuthorizationError(exceptions.APIException):
    """Identity is known but not allowed to act on the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to perform this action."
    default_code = "forbidden"


class SelfVoteError(AuthorizationError):
    default_detail = "User cannot vote on their own answer"
    default_code = "self_vote"


class NotFoundError(exceptions.APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists."
    default_code = "conflict"


class TooManyRequests(exceptions.APIException):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = "Too many requests. Please try again later."
    default_code = "too_many_requests"


class InternalError(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error."
    default_code = "internal_error"


def _first_message(data):
    if isinstance(data, dict):
        for value in data.values():
            return _first_message(value)
        return ""
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ""
    return str(data)


def _as_message_payload(data):
    if isinstance(data, dict) and set(data) == {"detail"}:
        return {"message": str(data["detail"])}
    return {"message": _first_message(data), "errors": data}


def api_exception_handler(exc, context):
    """
    DRF exception handler producing ``{"message": ...}`` bodies.

    Known API exceptions keep their status code. Anything else is an
    unexpected failure: it is logged with its traceback, the transaction is
    marked for rollback and the raw message goes back with a 500.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled error in %s: %s",
            view.__class__.__name__ if view else "unknown view",
            exc,
            exc_info=exc,
        )
        set_rollback()
        return Response(
            {"message": str(exc) or InternalError.default_detail},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    response.data = _as_message_payload(response.data)
    return response


def json_not_found(request, exception=None):
    """``handler404``: unmatched routes answer in the API's error shape, not HTML."""
    return JsonResponse({"message": "Not found."}, status=status.HTTP_404_NOT_FOUND)


def json_server_error(request):
    """``handler500`` for failures that escape DRF (middleware, non-API views)."""
    return JsonResponse(
        {"message": InternalError.default_detail},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
