"""Validation and decoding of completion responses."""

from __future__ import annotations

import json
import re
from typing import Any

import structlog
from pydantic import ValidationError

from ...core.exceptions import ResponseFormatError, validation_details
from ...models.flashcard import FlashcardProposal
from ...models.schemas import CompletionResponse, ResponseFormat, ResponsePayload

logger = structlog.get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_ARRAY_RE = re.compile(r"\[\s*\{.*\}\s*\]", re.DOTALL)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def validate_completion(data: Any) -> CompletionResponse:
    """Check the transport-level shape: id, model and a non-empty ``choices`` with content."""
    try:
        return CompletionResponse.model_validate(data)
    except ValidationError as e:
        logger.error("Invalid API response structure", errors=e.error_count())
        raise ResponseFormatError(
            f"Invalid API response structure: {e.errors()[0]['msg']}",
            details=validation_details(e),
            original_error=e,
        ) from e


def decode_json_content(content: str | dict[str, Any] | list[Any]) -> dict[str, Any] | list[Any]:
    """Decode message content as JSON; structured values are returned as-is."""
    if not isinstance(content, str):
        return content
    try:
        decoded = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse JSON response", position=e.pos)
        raise ResponseFormatError(f"Failed to parse JSON response: {e.msg}", original_error=e) from e
    if not isinstance(decoded, (dict, list)):
        raise ResponseFormatError(f"Expected a JSON object or array, got {type(decoded).__name__}")
    return decoded


def extract_json_block(content: str) -> dict[str, Any] | list[Any]:
    """Find JSON inside free text, tolerating code fences and surrounding prose.

    Arrays are preferred over objects since batch generation asks for a list.
    """
    candidates: list[str] = [content.strip()]
    candidates.extend(match.strip() for match in _FENCE_RE.findall(content))
    for pattern in (_ARRAY_RE, _OBJECT_RE):
        match = pattern.search(content)
        if match:
            candidates.append(match.group(0))

    for candidate in candidates:
        try:
            decoded = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(decoded, (dict, list)):
            return decoded

    raise ResponseFormatError("No JSON value found in response", details={"preview": content[:100]})


def parse_response(
    response: CompletionResponse,
    response_format: ResponseFormat | None = None,
    lenient: bool = False,
) -> ResponsePayload:
    """Turn a validated completion into a ``ResponsePayload``.

    With a ``json_schema`` response format the first choice's content is
    decoded; otherwise it is returned verbatim. ``lenient`` digs the JSON out
    of prose or code fences instead of requiring a bare JSON document.
    """
    content = response.choices[0].message.content
    if response_format is not None and response_format.type == "json_schema":
        if lenient and isinstance(content, str):
            content = extract_json_block(content)
        else:
            content = decode_json_content(content)

    logger.debug("Successfully parsed response", model=response.model, response_id=response.id)
    return ResponsePayload(
        message=content,
        model=response.model,
        id=response.id,
        raw=response.model_dump(mode="json"),
    )


def parse_flashcard(message: Any) -> FlashcardProposal:
    """Validate a decoded message against the ``FlashcardProposal`` shape."""
    if isinstance(message, str):
        message = decode_json_content(message)
    if not isinstance(message, dict):
        raise ResponseFormatError(f"Expected a flashcard object, got {type(message).__name__}")
    try:
        return FlashcardProposal.model_validate(message)
    except ValidationError as e:
        raise ResponseFormatError(
            "Response does not match FlashcardProposal",
            details=validation_details(e),
            original_error=e,
        ) from e
