"""Configuration for the gateway and its host."""

from .config import Settings, get_settings
from .gateway_settings import DEFAULT_API_ENDPOINT, DEFAULT_MODEL_NAME, DEFAULT_PROVIDER, GatewayConfig
from .logging import LogFormat, LoggingConfig, LogLevel, get_logger, setup_logging

__all__ = [
    "GatewayConfig",
    "DEFAULT_API_ENDPOINT",
    "DEFAULT_MODEL_NAME",
    "DEFAULT_PROVIDER",
    "Settings",
    "get_settings",
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "setup_logging",
    "get_logger",
]
