"""Core module containing cross-cutting concerns."""

from .exceptions import (
    AuthenticationError,
    CompletionError,
    ConfigurationError,
    GatewayError,
    NetworkError,
    RequestCancelledError,
    RequestTimeoutError,
    ResponseFormatError,
)
from .config import GatewayConfig, LoggingConfig, Settings, get_settings, setup_logging

__all__ = [
    # Configuration
    "GatewayConfig",
    "LoggingConfig",
    "Settings",
    "get_settings",
    "setup_logging",
    # Exceptions
    "GatewayError",
    "ConfigurationError",
    "AuthenticationError",
    "NetworkError",
    "RequestTimeoutError",
    "ResponseFormatError",
    "CompletionError",
    "RequestCancelledError",
]
