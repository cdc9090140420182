"""Host-side settings loaded from environment variables.

The gateway never reads the environment itself; callers use ``Settings`` to
build a ``GatewayConfig`` and a ``LoggingConfig``.
"""

from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .gateway_settings import DEFAULT_API_ENDPOINT, DEFAULT_MODEL_NAME, DEFAULT_SITE_URL, GatewayConfig
from .logging import LogFormat, LoggingConfig, LogLevel

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenRouter Configuration
    OPENROUTER_API_KEY: SecretStr | None = Field(default=None)
    OPENROUTER_API_ENDPOINT: str = Field(default=DEFAULT_API_ENDPOINT)
    OPENROUTER_DEFAULT_MODEL: str = Field(default=DEFAULT_MODEL_NAME)
    OPENROUTER_REQUEST_TIMEOUT: float = Field(default=60.0, gt=0)
    OPENROUTER_RETRY_COUNT: int = Field(default=3, ge=0, le=10)
    PUBLIC_SITE_URL: str = Field(default=DEFAULT_SITE_URL)
    USE_AI_MOCK: bool = Field(default=False)

    # Logging Configuration
    OPENROUTER_LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_FORMAT: LogFormat = Field(default=LogFormat.JSON)
    LOG_FILE_PATH: str | None = Field(default=None)

    def gateway_config(self, **overrides: Any) -> GatewayConfig:
        """Build a validated ``GatewayConfig``; raises ``ConfigurationError`` if the key is missing."""
        data: dict[str, Any] = {
            "api_endpoint": self.OPENROUTER_API_ENDPOINT,
            "api_key": self.OPENROUTER_API_KEY.get_secret_value() if self.OPENROUTER_API_KEY else "",
            "model_name": self.OPENROUTER_DEFAULT_MODEL,
            "request_timeout": self.OPENROUTER_REQUEST_TIMEOUT,
            "retry_count": self.OPENROUTER_RETRY_COUNT,
            "site_url": self.PUBLIC_SITE_URL,
        }
        data.update(overrides)
        return GatewayConfig.from_mapping(data)

    def logging_config(self) -> LoggingConfig:
        """Generate logging configuration from individual settings."""
        return LoggingConfig(level=self.OPENROUTER_LOG_LEVEL, format=self.LOG_FORMAT, file_path=self.LOG_FILE_PATH)

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump settings without exposing secrets."""
        data = self.model_dump()
        if data.get("OPENROUTER_API_KEY"):
            data["OPENROUTER_API_KEY"] = "***masked***"
        return data


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
