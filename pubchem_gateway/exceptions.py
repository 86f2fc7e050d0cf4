"""
Gateway exception types.

Every non-successful upstream outcome is translated into exactly one of the
UpstreamError subclasses below, in one place: error_for_status().
"""

from enum import Enum
from typing import Any

SOURCE = "pubchem"
DEFAULT_STATUS_MESSAGE = "No status message"


class ErrorKind(str, Enum):
    """Closed set of error kinds surfaced to callers."""

    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        upstream_message: str | None = None,
        response_body: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.upstream_message = upstream_message
        self.response_body = response_body
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{SOURCE}]", self.message]
        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Render the error the way callers present it to users."""
        details = dict(self.details)
        if self.status_code is not None:
            details["httpStatusCode"] = self.status_code
        if self.upstream_message is not None:
            details["upstreamMessage"] = self.upstream_message
        if self.response_body:
            details["responseBody"] = self.response_body
        return {
            "code": self.kind.value,
            "message": self.message,
            "details": details,
        }


class InternalError(GatewayError):
    """Programming-logic fault unrelated to upstream communication."""

    kind = ErrorKind.INTERNAL_ERROR


class UpstreamError(GatewayError):
    """Base for errors originating from the upstream service."""

    kind = ErrorKind.EXTERNAL_SERVICE_ERROR


class InvalidInputError(UpstreamError):
    """Invalid request (HTTP 400), or input rejected before any call."""

    kind = ErrorKind.INVALID_INPUT


class NotFoundError(UpstreamError):
    """Resource not found (HTTP 404) or nothing found across sub-requests."""

    kind = ErrorKind.NOT_FOUND


class MethodNotAllowedError(UpstreamError):
    """Operation not supported for the requested record (HTTP 405)."""

    kind = ErrorKind.METHOD_NOT_ALLOWED


class ServiceUnavailableError(UpstreamError):
    """Upstream busy or throttling us (HTTP 503)."""

    kind = ErrorKind.SERVICE_UNAVAILABLE


class GatewayTimeoutError(UpstreamError):
    """Call timed out, locally or upstream (HTTP 504)."""

    kind = ErrorKind.GATEWAY_TIMEOUT

    def __init__(
        self,
        message: str = "Request timed out",
        timeout: float | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.timeout = timeout


class ExternalServiceError(UpstreamError):
    """Any other upstream failure."""

    kind = ErrorKind.EXTERNAL_SERVICE_ERROR


STATUS_ERRORS: dict[int, type[UpstreamError]] = {
    400: InvalidInputError,
    404: NotFoundError,
    405: MethodNotAllowedError,
    503: ServiceUnavailableError,
    504: GatewayTimeoutError,
}


def error_for_status(
    status_code: int,
    upstream_message: str | None = None,
    response_body: str | None = None,
) -> UpstreamError:
    """Build the error for a non-2xx upstream status."""
    upstream_message = upstream_message or DEFAULT_STATUS_MESSAGE
    error_cls = STATUS_ERRORS.get(status_code, ExternalServiceError)
    return error_cls(
        f"PubChem API Error: {upstream_message}",
        status_code=status_code,
        upstream_message=upstream_message,
        response_body=response_body,
    )
