"""Mapping of HTTP statuses and exceptions onto the gateway error taxonomy."""

from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import ValidationError

from ...core.exceptions import (
    AuthenticationError,
    CompletionError,
    GatewayError,
    NetworkError,
    RequestTimeoutError,
    ResponseFormatError,
)

AUTH_STATUSES = frozenset({401, 403})
MAX_DETAIL_LENGTH = 500


def classify_status(status_code: int, reason: str = "", body: str = "") -> GatewayError | None:
    """Classify a response status; returns ``None`` for 2xx.

    401/403 become ``AuthenticationError``, 5xx ``NetworkError`` and any other
    non-2xx status a ``CompletionError``.
    """
    if 200 <= status_code < 300:
        return None

    details: dict[str, Any] = {"status_code": status_code}
    if body:
        details["body"] = body[:MAX_DETAIL_LENGTH]

    if status_code in AUTH_STATUSES:
        return AuthenticationError(f"Authentication failed: {status_code} {reason}".strip(), details=details)
    if status_code >= 500:
        return NetworkError(f"Server error: {status_code} {reason}".strip(), details=details)
    return CompletionError(f"HTTP error: {status_code} {reason}".strip(), status_code=status_code, details=details)


def classify_exception(error: Exception) -> GatewayError:
    """Wrap an arbitrary exception; gateway errors pass through unchanged."""
    if isinstance(error, GatewayError):
        return error
    if isinstance(error, (httpx.TimeoutException, TimeoutError)):
        return RequestTimeoutError(f"Request timed out: {error}", original_error=error)
    if isinstance(error, httpx.HTTPError):
        return NetworkError(f"Network error: {error}", original_error=error)
    if isinstance(error, (ValidationError, json.JSONDecodeError)):
        return ResponseFormatError(f"Invalid response: {error}", original_error=error)
    return GatewayError(f"Unexpected gateway failure: {error}", original_error=error)
