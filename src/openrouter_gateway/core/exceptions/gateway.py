"""Concrete gateway exception classes, one per ErrorKind."""

from typing import Any

from ...domain.enums import ErrorKind
from .base import GatewayError


class ConfigurationError(GatewayError):
    """Raised when construction input or an assembled payload is invalid."""

    kind = ErrorKind.CONFIGURATION


class AuthenticationError(GatewayError):
    """Raised when the completion endpoint rejects the credentials (401/403)."""

    kind = ErrorKind.AUTHENTICATION


class NetworkError(GatewayError):
    """Raised on transport failures and 5xx responses."""

    kind = ErrorKind.NETWORK


class RequestTimeoutError(NetworkError):
    """Raised when a single attempt exceeds the request timeout."""

    pass


class ResponseFormatError(GatewayError):
    """Raised when a response cannot be decoded or does not match the expected shape."""

    kind = ErrorKind.RESPONSE_FORMAT


class CompletionError(GatewayError):
    """Raised on non-2xx responses that are neither auth nor server errors."""

    kind = ErrorKind.COMPLETION

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, error_code=error_code, details=details, original_error=original_error)
        self.status_code = status_code


class RequestCancelledError(GatewayError):
    """Raised when the caller's cancel event is set mid-operation."""

    kind = ErrorKind.CANCELLED
