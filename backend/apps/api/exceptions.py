from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from django.core.exceptions import (
    PermissionDenied as DjangoPermissionDenied,
    ValidationError as DjangoValidationError,
)
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import ERROR_STATUS_MAP, error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

GENERIC_SERVER_MESSAGE = "Something went wrong"

# Exception type -> (error code, fallback message); first match wins.
ERROR_CLASSIFICATION: Tuple[Tuple[type, str, str], ...] = (
    (drf_exceptions.ValidationError, "VALIDATION_ERROR", "Validation failed"),
    (drf_exceptions.ParseError, "VALIDATION_ERROR", "Malformed request"),
    (drf_exceptions.AuthenticationFailed, "UNAUTHORIZED", "Authentication failed"),
    (drf_exceptions.NotAuthenticated, "UNAUTHORIZED", "Authentication required"),
    (
        drf_exceptions.PermissionDenied,
        "FORBIDDEN",
        "You do not have permission to perform this action",
    ),
    (
        DjangoPermissionDenied,
        "FORBIDDEN",
        "You do not have permission to perform this action",
    ),
    (drf_exceptions.NotFound, "NOT_FOUND", "Resource not found"),
    (Http404, "NOT_FOUND", "Resource not found"),
    (drf_exceptions.MethodNotAllowed, "METHOD_NOT_ALLOWED", "Method not allowed"),
    (
        drf_exceptions.UnsupportedMediaType,
        "UNSUPPORTED_MEDIA_TYPE",
        "Unsupported media type",
    ),
    (drf_exceptions.Throttled, "TOO_MANY_REQUESTS", "Request was throttled"),
)

FORWARDED_HEADERS = ("WWW-Authenticate", "Retry-After")


class ApplicationError(Exception):
    """
    Domain error raised from services and rendered by the global handler.

    Subclasses set ``default_code`` / ``default_message`` so call sites only
    pass what differs, e.g. ``CartItemNotFoundError(details={...})``.
    """

    default_code = "SERVER_ERROR"
    default_message = GENERIC_SERVER_MESSAGE

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        hint: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ):
        self.code = code or self.default_code
        self.message = message or self.default_message
        super().__init__(self.message)
        self.status_code = status_code
        self.details = details
        self.hint = hint
        self.extra = extra
        self.headers = headers

    def to_response(self) -> Response:
        return error_response(
            self.code,
            self.message,
            self.details,
            http_status=self.status_code,
            hint=self.hint,
            extra=self.extra,
            headers=self.headers,
        )


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER`` rendering every failure as the error envelope."""
    log = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        log.info("Handled application error", code=exc.code, status=exc.status_code)
        return exc.to_response()

    if isinstance(exc, DjangoValidationError):
        exc = drf_exceptions.ValidationError(_django_validation_detail(exc))

    response = drf_exception_handler(exc, context)
    if response is None:
        log.exception("Unhandled exception bubbled to global handler")
        return error_response(
            "SERVER_ERROR",
            GENERIC_SERVER_MESSAGE,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return _to_envelope(exc, response, log)


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view is not None:
        log = log.bind(view=type(view).__name__)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _classify(exc: Exception, status_code: int) -> Tuple[str, str]:
    for exc_type, code, fallback in ERROR_CLASSIFICATION:
        if isinstance(exc, exc_type):
            return code, fallback
    for code, mapped_status in ERROR_STATUS_MAP.items():
        if mapped_status == status_code:
            return code, "Request failed"
    if status_code >= 500:
        return "SERVER_ERROR", GENERIC_SERVER_MESSAGE
    return "REQUEST_FAILED", "Request failed"


def _to_envelope(exc: Exception, response: Response, log) -> Response:
    status_code = response.status_code
    code, fallback = _classify(exc, status_code)
    payload = response.data
    hint = None

    if status_code >= 500:
        message, details = GENERIC_SERVER_MESSAGE, None
    elif isinstance(exc, drf_exceptions.ValidationError):
        # Field errors go to details; the message stays generic.
        message, details = fallback, payload
    else:
        message = _detail_message(payload) or fallback
        details = _extra_details(payload)

    if isinstance(exc, drf_exceptions.Throttled) and exc.wait is not None:
        details = {"retryAfter": exc.wait}
        hint = "Wait before retrying this request."

    if status_code >= 500:
        log.error("Converted server error", code=code, status=status_code)
    else:
        log.info("Converted API exception", code=code, status=status_code)

    headers = {
        name: response[name] for name in FORWARDED_HEADERS if response.has_header(name)
    }
    return error_response(
        code,
        message,
        details,
        http_status=status_code,
        hint=hint,
        headers=headers or None,
    )


def _detail_message(payload: Any) -> Optional[str]:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return None


def _extra_details(payload: Any) -> Optional[Any]:
    """Anything beyond DRF's bare ``{"detail": ...}`` is passed to the client."""
    if isinstance(payload, dict):
        rest = {k: v for k, v in payload.items() if k != "detail"}
        return rest or None
    return None


def _django_validation_detail(exc: DjangoValidationError) -> Any:
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    return list(exc.messages)


__all__ = ["ApplicationError", "global_exception_handler"]
