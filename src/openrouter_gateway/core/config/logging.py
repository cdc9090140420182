"""Logging configuration and setup for the OpenRouter gateway."""

from __future__ import annotations

import logging
import re
import sys
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field
from structlog.types import EventDict, WrappedLogger

REDACTED = "[REDACTED]"

SENSITIVE_FIELDS = frozenset(
    {
        "apikey",
        "api_key",
        "openrouter_api_key",
        "authorization",
        "token",
        "access_token",
        "auth_token",
        "password",
        "secret",
    }
)

_BEARER_RE = re.compile(r"(Bearer\s+)[^\s\"']+", re.IGNORECASE)


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Supported logging output formats."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Centralized logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Logging level for the gateway")
    format: LogFormat = Field(default=LogFormat.JSON, description="Output format for log messages")
    console_enabled: bool = Field(default=True, description="Enable console output")
    file_path: str | None = Field(default=None, description="Rotating log file, disabled when unset")
    max_file_size: int = Field(default=10 * 1024 * 1024, ge=1024 * 1024, le=100 * 1024 * 1024)
    backup_count: int = Field(default=5, ge=0)

    # Third-party Logging Levels
    third_party_levels: dict[str, LogLevel] = Field(
        default_factory=lambda: {"httpx": LogLevel.WARNING, "httpcore": LogLevel.WARNING},
        description="Logging levels for third-party libraries",
    )


def redact_value(value: Any) -> Any:
    """Mask bearer tokens in strings and sensitive keys in mappings."""
    if isinstance(value, str):
        return _BEARER_RE.sub(rf"\g<1>{REDACTED}", value)
    if isinstance(value, dict):
        return {k: REDACTED if str(k).lower() in SENSITIVE_FIELDS else redact_value(v) for k, v in value.items()}
    return value


def redact_sensitive_data(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor that keeps credentials out of log output."""
    for key in list(event_dict):
        if key.lower() in SENSITIVE_FIELDS:
            event_dict[key] = REDACTED
        else:
            event_dict[key] = redact_value(event_dict[key])
    return event_dict


class StructuredLogger:
    """One-time structlog configuration routed through the stdlib root logger."""

    _configured: bool = False

    @classmethod
    def configure(cls, config: LoggingConfig, force: bool = False) -> None:
        """Configure structured logging."""
        if cls._configured and not force:
            return

        handlers: list[logging.Handler] = []
        if config.console_enabled:
            handlers.append(logging.StreamHandler(sys.stdout))
        if config.file_path:
            Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                RotatingFileHandler(
                    filename=config.file_path,
                    maxBytes=config.max_file_size,
                    backupCount=config.backup_count,
                    encoding="utf-8",
                )
            )
        if not handlers:
            handlers.append(logging.NullHandler())

        logging.basicConfig(format="%(message)s", level=config.level.value, handlers=handlers, force=True)

        for lib_name, level in config.third_party_levels.items():
            logging.getLogger(lib_name).setLevel(level.value)

        renderer: Any = structlog.processors.JSONRenderer() if config.format == LogFormat.JSON else structlog.dev.ConsoleRenderer(colors=False)

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                redact_sensitive_data,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                renderer,
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        cls._configured = True

        structlog.get_logger(__name__).info(
            "Logging system initialized",
            level=config.level.value,
            format=config.format.value,
            file_path=config.file_path,
        )


def setup_logging(config: LoggingConfig | None = None, force: bool = False) -> None:
    """Set up gateway logging."""
    StructuredLogger.configure(config or LoggingConfig(), force=force)


def get_logger(name: str) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
