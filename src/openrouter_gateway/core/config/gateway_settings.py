"""Gateway construction parameters with sensible defaults and validation."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from ...models.schemas import ModelParameters
from ..exceptions import ConfigurationError, validation_details

DEFAULT_API_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL_NAME = "openai/gpt-4"
DEFAULT_PROVIDER = "openai"
DEFAULT_SITE_URL = "https://10xcards.app"


def _default_model_params() -> ModelParameters:
    return ModelParameters(temperature=0.7, max_tokens=2048)


class GatewayConfig(BaseModel):
    """Validated configuration for ``OpenRouterService``."""

    model_config = ConfigDict(extra="forbid", protected_namespaces=(), validate_assignment=True)

    # Endpoint Configuration
    api_endpoint: str = Field(default=DEFAULT_API_ENDPOINT, description="Chat completion URL")
    api_key: SecretStr = Field(..., description="Bearer token for the completion endpoint")
    site_url: str = Field(default=DEFAULT_SITE_URL, description="Value sent as HTTP-Referer")

    # Model Configuration
    model_name: str = Field(default=DEFAULT_MODEL_NAME, description="Default model in provider/model form")
    model_params: ModelParameters = Field(default_factory=_default_model_params)

    # Request Configuration
    request_timeout: float = Field(default=60.0, gt=0, description="Per-attempt timeout in seconds")
    retry_count: int = Field(default=3, ge=0, le=10, description="Retries after the first attempt")
    backoff_base_ms: int = Field(default=1000, gt=0)
    backoff_max_ms: int = Field(default=30000, gt=0)
    backoff_jitter: bool = Field(default=False, description="Randomize backoff delays by +/-25%")

    # Context and Cache Configuration
    max_tokens: int = Field(default=8000, gt=0, description="Estimated token budget for chat history")
    cache_ttl_seconds: float = Field(default=30 * 60, gt=0)
    cache_max_entries: int | None = Field(default=256, ge=1, description="LRU bound; None disables it")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("API key is required")
        return v

    @field_validator("api_endpoint", "site_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"'{v}' is not an http(s) URL")
        return v.rstrip("/")

    @field_validator("model_name")
    @classmethod
    def normalize_model_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            return DEFAULT_MODEL_NAME
        return v if "/" in v else f"{DEFAULT_PROVIDER}/{v}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GatewayConfig":
        """Validate raw construction input, raising ``ConfigurationError`` on failure."""
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}",
                details={"type": type(data).__name__},
            )
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e.error_count()} error(s)",
                details=validation_details(e),
                original_error=e,
            ) from e

    @property
    def base_url(self) -> str:
        """API root used for auxiliary calls such as health checks."""
        endpoint = self.api_endpoint
        suffix = "/chat/completions"
        return endpoint[: -len(suffix)] if endpoint.endswith(suffix) else endpoint

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump configuration without exposing the API key."""
        data = self.model_dump(mode="json")
        data["api_key"] = "***masked***"
        return data
