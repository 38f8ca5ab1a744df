"""
Uniform error envelope for the API:

    {"success": false, "error": {"message": "...", "code": "..."}}
"""
import logging

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class BusinessRuleError(exceptions.APIException):
    """A domain rule was violated (bad status transition, slot conflict, ...)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request violates a business rule."
    default_code = "BAD_REQUEST"

    def __init__(self, message=None, code=None, status_code=None):
        super().__init__(detail=message, code=code or self.default_code)
        if status_code is not None:
            self.status_code = status_code
        self.error_code = code or self.default_code


_CODES = {
    exceptions.ValidationError: "VALIDATION_ERROR",
    exceptions.ParseError: "VALIDATION_ERROR",
    exceptions.NotAuthenticated: "UNAUTHORIZED",
    exceptions.AuthenticationFailed: "UNAUTHORIZED",
    exceptions.PermissionDenied: "FORBIDDEN",
    exceptions.NotFound: "NOT_FOUND",
    exceptions.MethodNotAllowed: "METHOD_NOT_ALLOWED",
    exceptions.Throttled: "RATE_LIMITED",
}


def error_body(message, code, details=None) -> dict:
    err = {"message": str(message), "code": str(code)}
    if details is not None:
        err["details"] = details
    return {"success": False, "error": err}


def _code_for(exc) -> str:
    explicit = getattr(exc, "error_code", None)
    if explicit:
        return str(explicit)
    for cls, code in _CODES.items():
        if isinstance(exc, cls):
            return code
    return "ERROR"


def _message_for(exc) -> str:
    detail = getattr(exc, "detail", None)
    if isinstance(exc, exceptions.ValidationError):
        return "Invalid request data"
    if isinstance(detail, (list, tuple)) and detail:
        return str(detail[0])
    if isinstance(detail, dict):
        # simplejwt nests its message under "detail"
        return str(detail.get("detail", "Invalid request data"))
    return str(detail) if detail is not None else str(exc)


def api_exception_handler(exc, context):
    if isinstance(exc, Http404):
        exc = exceptions.NotFound()

    response = exception_handler(exc, context)
    if response is None:
        # unexpected error: let Django's 500 handling (and logging) take over
        return None

    decision = getattr(exc, "decision", None)
    if decision is not None:
        # denied access decisions carry their own body
        response.data = decision.body()
    else:
        details = exc.detail if isinstance(exc, exceptions.ValidationError) else None
        response.data = error_body(_message_for(exc), _code_for(exc), details)
    if response.status_code >= 500:
        logger.error(f"API error {response.status_code}: {response.data}")
    return response
