"""Exception hierarchy for the OpenRouter gateway.

Every error raised by the gateway is a ``GatewayError`` tagged with an
``ErrorKind`` so callers can tell bad credentials apart from an unavailable
service or an unintelligible response.
"""

from .base import GatewayError, validation_details
from .gateway import (
    AuthenticationError,
    CompletionError,
    ConfigurationError,
    NetworkError,
    RequestCancelledError,
    RequestTimeoutError,
    ResponseFormatError,
)

__all__ = [
    "GatewayError",
    "validation_details",
    "ConfigurationError",
    "AuthenticationError",
    "NetworkError",
    "RequestTimeoutError",
    "ResponseFormatError",
    "CompletionError",
    "RequestCancelledError",
]
