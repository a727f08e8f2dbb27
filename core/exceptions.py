from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger("hub.api")


def _error_code(exc, default="error"):
    codes = getattr(exc, "get_codes", None)
    if callable(codes):
        value = codes()
        if isinstance(value, str):
            return value
    return getattr(exc, "default_code", default)


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into the activity envelope:
    {"success": false, "error": {"code", "message", "details"?}}

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        data = response.data
        if isinstance(data, dict) and set(data) == {"detail"}:
            error = {"code": _error_code(exc), "message": str(data["detail"])}
        else:
            error = {"code": "validation_error", "message": "Invalid input.", "details": data}
        return Response(
            {"success": False, "error": error},
            status=response.status_code,
        )

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "success": False,
            "error": {"code": "internal_error", "message": "Internal server error."},
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
