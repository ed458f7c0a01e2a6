from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger("cos")


# ---- Domain error taxonomy ---------------------------------------------
#
# Services raise these; views let them propagate to the handler below.


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class PermissionDenied(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied."
    default_code = "permission_denied"


# HTTP vocabulary
Forbidden = PermissionDenied


class InvalidState(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Operation not allowed in the current state."
    default_code = "invalid_state"


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"


class Unauthorized(APIException):
    """
    Challenge-answer mismatch during self-service check-in.

    Deliberately not a NotAuthenticated subclass: DRF would try to attach a
    WWW-Authenticate header or downgrade it to 403.
    """
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Incorrect answer to the verification question."
    default_code = "wrong_answer"


class RenderFailed(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Failed to generate certificate."
    default_code = "render_failed"


class RosterContention(APIException):
    """The event roster changed between the admission checks and the append."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "The event was updated concurrently, please retry."
    default_code = "roster_contention"


def _first_message(data):
    """
    Pull a single human-readable string out of DRF error data
    (str, list or nested dict).
    """
    if isinstance(data, dict):
        if "detail" in data:
            return _first_message(data["detail"])
        for key, value in data.items():
            message = _first_message(value)
            if key == "non_field_errors":
                return message
            return f"{key}: {message}"
        return "Invalid request."
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else "Invalid request."
    return str(data)


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into a consistent response format:

        {"success": false, "status_code": 409, "error": "You are already registered."}

    Validation errors also carry the field-level "errors" payload.
    Success responses (2xx) are not touched.
    """
    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        body = {
            "success": False,
            "status_code": response.status_code,
            "error": _first_message(response.data),
        }
        if isinstance(exc, ValidationError):
            body["errors"] = response.data
        return Response(body, status=response.status_code, headers=_passthrough_headers(response))

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "success": False,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "error": "Internal server error.",
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _passthrough_headers(response):
    # Keep throttling / auth hints DRF attached to the original response
    return {
        key: response[key]
        for key in ("Retry-After", "WWW-Authenticate")
        if response.has_header(key)
    }
