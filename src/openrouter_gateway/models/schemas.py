"""Pydantic models for the chat completion exchange."""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..domain.enums import ChatRole

SCALAR_TYPES = (str, int, float, bool)


class ChatMessage(BaseModel):
    """A single message of a conversation."""

    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: str


class ModelParameters(BaseModel):
    """Open mapping of sampling parameters passed through to the request.

    Well-known keys are range-checked; any other key is accepted as long as
    its value is a scalar.
    """

    model_config = ConfigDict(extra="allow")

    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, gt=0)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    frequency_penalty: float | None = Field(default=None, ge=-2.0, le=2.0)
    presence_penalty: float | None = Field(default=None, ge=-2.0, le=2.0)

    @model_validator(mode="after")
    def validate_extra_scalars(self) -> ModelParameters:
        for key, value in (self.model_extra or {}).items():
            if value is not None and not isinstance(value, SCALAR_TYPES):
                raise ValueError(f"Model parameter '{key}' must be a scalar, got {type(value).__name__}")
        return self

    def as_dict(self) -> dict[str, Any]:
        """Return only the parameters that are set."""
        return self.model_dump(exclude_none=True)

    def merged(self, overrides: ModelParameters | dict[str, Any] | None) -> ModelParameters:
        """Return a new instance with ``overrides`` layered on top."""
        if overrides is None:
            return self.model_copy()
        extra = overrides.as_dict() if isinstance(overrides, ModelParameters) else dict(overrides)
        return ModelParameters.model_validate({**self.as_dict(), **extra})


class JsonSchemaSpec(BaseModel):
    """Named JSON schema the remote model must conform to."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    strict: bool = True
    schema_definition: dict[str, Any] = Field(alias="schema")


class ResponseFormat(BaseModel):
    """Structured output declaration attached to a request."""

    type: Literal["json_schema"] = "json_schema"
    json_schema: JsonSchemaSpec


class RequestPayload(BaseModel):
    """Outbound body of ``POST <endpoint>``; model parameters ride as extra keys."""

    model_config = ConfigDict(extra="allow")

    messages: list[ChatMessage] = Field(min_length=1)
    model: str
    response_format: ResponseFormat | None = None

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        """Require the ``provider/model`` convention."""
        provider, sep, name = v.partition("/")
        if not sep or not provider.strip() or not name.strip() or "/" in name:
            raise ValueError(f"Model must look like 'provider/model', got '{v}'")
        return v

    @model_validator(mode="after")
    def validate_parameter_types(self) -> RequestPayload:
        for key, value in (self.model_extra or {}).items():
            if not isinstance(value, SCALAR_TYPES):
                raise ValueError(f"Model parameter '{key}' must be a scalar, got {type(value).__name__}")
        return self

    @property
    def model_params(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def to_request_body(self) -> dict[str, Any]:
        """Serialize to the JSON body sent over the wire."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CompletionMessage(BaseModel):
    """Message inside a completion choice."""

    role: ChatRole = ChatRole.ASSISTANT
    content: str | dict[str, Any] | list[Any]

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str | dict[str, Any] | list[Any]) -> str | dict[str, Any] | list[Any]:
        if isinstance(v, str) and not v.strip():
            raise ValueError("message content is empty")
        return v


class CompletionChoice(BaseModel):
    """One generated alternative."""

    message: CompletionMessage
    index: int = 0
    finish_reason: str | None = None


class CompletionUsage(BaseModel):
    """Token accounting reported by the endpoint."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class CompletionResponse(BaseModel):
    """Validated transport-level completion response."""

    id: str
    model: str
    choices: list[CompletionChoice] = Field(min_length=1)
    usage: CompletionUsage | None = None


class ResponsePayload(BaseModel):
    """Normalized result handed back to callers."""

    message: str | dict[str, Any] | list[Any]
    model: str
    id: str
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def message_text(self) -> str:
        """The message as text; structured values are rendered as JSON."""
        if isinstance(self.message, str):
            return self.message
        return json.dumps(self.message, ensure_ascii=False)
