"""Assembly and static validation of outbound completion requests."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from ...core.config.gateway_settings import DEFAULT_PROVIDER
from ...core.exceptions import ConfigurationError, validation_details
from ...models.schemas import ChatMessage, JsonSchemaSpec, ModelParameters, RequestPayload, ResponseFormat

logger = structlog.get_logger(__name__)


def normalize_model_name(name: str, default_provider: str = DEFAULT_PROVIDER) -> str:
    """Prefix ``default_provider`` when ``name`` has no provider part."""
    name = name.strip()
    if name and "/" not in name:
        return f"{default_provider}/{name}"
    return name


def create_json_schema(name: str, schema: dict[str, Any], strict: bool = True) -> ResponseFormat:
    """Build a ``json_schema`` response format."""
    return ResponseFormat(json_schema=JsonSchemaSpec(name=name, strict=strict, schema=schema))


def build_request_payload(
    messages: Sequence[ChatMessage],
    response_format: ResponseFormat | None,
    model: str,
    model_params: ModelParameters | Mapping[str, Any] | None = None,
) -> RequestPayload:
    """Assemble a request and validate its shape.

    Raises:
        ConfigurationError: If messages are empty, the model name is malformed
            or a parameter is not a scalar. Never retried.
    """
    if isinstance(model_params, ModelParameters):
        params = model_params.as_dict()
    else:
        params = {k: v for k, v in (model_params or {}).items() if v is not None}

    data: dict[str, Any] = {
        **params,
        "messages": list(messages),
        "model": normalize_model_name(model),
    }
    if response_format is not None:
        data["response_format"] = response_format

    try:
        return RequestPayload.model_validate(data)
    except ValidationError as e:
        logger.error("Invalid request payload", errors=e.error_count())
        raise ConfigurationError(
            f"Invalid request payload: {e.errors()[0]['msg']}",
            details=validation_details(e),
            original_error=e,
        ) from e
