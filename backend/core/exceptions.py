import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .errors import CasinoError

logger = logging.getLogger(__name__)


def casino_exception_handler(exc, context):
    """
    Every API failure goes out as {"success": false, "error": ..., "code": ...}.
    """
    if isinstance(exc, CasinoError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code}: {exc.message}")
        return Response(exc.to_dict(), status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {
            "success": False,
            "error": "Invalid request data",
            "code": "VALIDATION_ERROR",
            "details": response.data,
        }
        response.status_code = status.HTTP_400_BAD_REQUEST
        return response

    detail = response.data.get("detail") if isinstance(response.data, dict) else response.data
    response.data = {
        "success": False,
        "error": str(detail),
        "code": getattr(exc, "default_code", "error").upper(),
    }
    return response
