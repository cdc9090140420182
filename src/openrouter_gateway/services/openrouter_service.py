"""Stateful gateway session for structured flashcard generation and chat."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, TypeVar

import httpx
import structlog

from ..core.config.gateway_settings import GatewayConfig
from ..core.exceptions import ConfigurationError, GatewayError
from ..domain.enums import ChatRole
from ..infrastructure.cache.response_cache import InMemoryResponseCache, ResponseCache, make_cache_key
from ..infrastructure.history.chat_history import ChatHistoryStore, InMemoryChatHistory, truncate_chat_history
from ..infrastructure.llm.clients.base_client import BaseCompletionClient
from ..infrastructure.llm.error_classifier import classify_exception
from ..infrastructure.llm.factory import create_client
from ..infrastructure.llm.payload_builder import build_request_payload, create_json_schema, normalize_model_name
from ..infrastructure.llm.response_parser import parse_flashcard, parse_response
from ..models.flashcard import FLASHCARD_PROPOSAL_SCHEMA, FlashcardProposal
from ..models.result import GatewayResult
from ..models.schemas import ChatMessage, ModelParameters, ResponseFormat, ResponsePayload
from ..utils.text import sanitize_input

logger = structlog.get_logger(__name__)

T = TypeVar("T")

FLASHCARD_SYSTEM_MESSAGE = (
    "Generate a flashcard based on the provided text. "
    "Create a concise question for the front and a comprehensive answer for the back. "
    "Include a helpful hint and appropriate difficulty rating. "
    "Add relevant tags for categorization."
)

FLASHCARD_SCHEMA_NAME = "FlashcardProposal"


class OpenRouterService:
    """Client-side gateway to the OpenRouter completion API.

    One instance per logical session. It owns the chat history, the response
    cache and the mutable model/prompt settings changed through the setters.

    Concurrent ``send_chat`` calls on one instance are allowed; each
    user/assistant pair is appended atomically, but the order of pairs across
    concurrent calls is whichever finishes first.
    """

    def __init__(
        self,
        config: GatewayConfig | Mapping[str, Any],
        *,
        client: BaseCompletionClient | None = None,
        cache: ResponseCache | None = None,
        history: ChatHistoryStore | None = None,
        use_mock: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Validate configuration and set up collaborators. No network I/O happens here.

        Args:
            config: Gateway configuration or a raw mapping to validate
            client: Completion client; defaults to one built by ``create_client``
            cache: Response cache; defaults to an in-memory TTL/LRU cache
            history: Chat history store; defaults to an in-memory store
            use_mock: Use the offline mock client when ``client`` is not given
            transport: httpx transport for the default HTTP client

        Raises:
            ConfigurationError: If the configuration is missing required fields or malformed
        """
        try:
            self.config = config if isinstance(config, GatewayConfig) else GatewayConfig.from_mapping(config)
        except ConfigurationError as e:
            logger.error("Failed to initialize OpenRouterService", error=e.message, details=e.details)
            raise

        self.system_message = ""
        self.user_message = ""
        self.response_format: ResponseFormat | None = None
        self.model_name = self.config.model_name
        self.model_params: ModelParameters = self.config.model_params.model_copy()

        self._client = client or create_client(self.config, use_mock=use_mock, transport=transport)
        self._cache: ResponseCache = cache or InMemoryResponseCache(
            ttl_seconds=self.config.cache_ttl_seconds,
            max_entries=self.config.cache_max_entries,
        )
        self._history: ChatHistoryStore = history or InMemoryChatHistory()

        logger.info(
            "OpenRouterService initialized",
            endpoint=self.config.api_endpoint,
            model=self.model_name,
            client=self._client.name,
        )

    async def __aenter__(self) -> OpenRouterService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the completion client's connections."""
        await self._client.close()

    # Settings

    @property
    def chat_history(self) -> list[ChatMessage]:
        """Copy of the conversation so far, oldest first."""
        return self._history.snapshot()

    def set_system_message(self, message: str) -> None:
        self.system_message = sanitize_input(message)

    def set_user_message(self, message: str) -> None:
        self.user_message = sanitize_input(message)

    def set_response_format(self, response_format: ResponseFormat | None) -> None:
        """Require (or with ``None``, stop requiring) structured output for chat."""
        self.response_format = response_format

    def set_model(self, name: str, parameters: ModelParameters | Mapping[str, Any] | None = None) -> None:
        """Switch model and merge ``parameters`` over the current ones.

        Raises:
            ConfigurationError: If a parameter is out of range or not a scalar
        """
        if name:
            self.model_name = normalize_model_name(name)
        try:
            self.model_params = self.model_params.merged(parameters)
        except ValueError as e:
            raise ConfigurationError(f"Invalid model parameters: {e}", original_error=e) from e

    def set_cache_config(self, expiry_minutes: float) -> None:
        """Change how long cached responses stay valid."""
        if expiry_minutes <= 0:
            raise ConfigurationError("Cache expiry must be positive", details={"expiry_minutes": expiry_minutes})
        self._cache.ttl_seconds = expiry_minutes * 60
        logger.debug("Cache expiry time updated", expiry_minutes=expiry_minutes)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def clear_history(self) -> None:
        await self._history.clear()

    # Operations

    async def complete_structured(
        self,
        messages: Sequence[ChatMessage],
        response_format: ResponseFormat,
        cancel_event: asyncio.Event | None = None,
        lenient: bool = False,
        validate: Callable[[ResponsePayload], object] | None = None,
    ) -> ResponsePayload:
        """Run a one-off structured completion through the cache and retry loop.

        The chat history is neither read nor updated. ``validate`` is applied
        to fresh responses before they are cached, so a response it rejects is
        never stored.
        """
        return await self._guard(
            "complete_structured",
            self._complete_structured(messages, response_format, cancel_event, lenient, validate),
        )

    async def _complete_structured(
        self,
        messages: Sequence[ChatMessage],
        response_format: ResponseFormat,
        cancel_event: asyncio.Event | None,
        lenient: bool = False,
        validate: Callable[[ResponsePayload], object] | None = None,
    ) -> ResponsePayload:
        payload = build_request_payload(messages, response_format, self.model_name, self.model_params)
        key = make_cache_key(payload.messages, payload.model, payload.model_params)

        cached = self._cache.get(key)
        if cached is not None:
            logger.info("Using cached structured response", schema=response_format.json_schema.name)
            return cached.response

        completion = await self._client.complete(payload, cancel_event=cancel_event)
        response = parse_response(completion, response_format, lenient=lenient)
        if validate is not None:
            validate(response)
        self._cache.set(key, response)
        return response

    async def generate_structured(self, source_text: str, cancel_event: asyncio.Event | None = None) -> FlashcardProposal:
        """Turn ``source_text`` into a validated flashcard proposal.

        Raises:
            ConfigurationError: If the source text is blank
            AuthenticationError: If the credentials are rejected
            NetworkError: If the service stays unavailable after all retries
            ResponseFormatError: If the reply is not a valid FlashcardProposal
            RequestCancelledError: If ``cancel_event`` is set
        """
        return await self._guard("generate_structured", self._generate_structured(source_text, cancel_event))

    async def _generate_structured(self, source_text: str, cancel_event: asyncio.Event | None) -> FlashcardProposal:
        if not source_text or not source_text.strip():
            raise ConfigurationError("Source text cannot be empty")

        logger.debug("Generating flashcard proposal from source text", text_length=len(source_text))
        messages = [
            ChatMessage(role=ChatRole.SYSTEM, content=FLASHCARD_SYSTEM_MESSAGE),
            ChatMessage(role=ChatRole.USER, content=source_text),
        ]
        response = await self._complete_structured(
            messages,
            create_json_schema(FLASHCARD_SCHEMA_NAME, FLASHCARD_PROPOSAL_SCHEMA),
            cancel_event,
            validate=lambda r: parse_flashcard(r.message),
        )
        return parse_flashcard(response.message)

    async def send_chat(self, message: str | None = None, cancel_event: asyncio.Event | None = None) -> ResponsePayload:
        """Send a chat message, using ``message`` or the one set via ``set_user_message``.

        The request carries the system message (if any), the history truncated
        to ``max_tokens`` and the user message. On success, from cache or
        not, the user message and the reply are appended to the history; on
        failure the history is left untouched.

        Raises:
            ConfigurationError: If there is no user message
            GatewayError: Any classified failure of the exchange
        """
        return await self._guard("send_chat", self._send_chat(message, cancel_event))

    async def _send_chat(self, message: str | None, cancel_event: asyncio.Event | None) -> ResponsePayload:
        user_message = sanitize_input(message) if message else self.user_message
        if not user_message:
            raise ConfigurationError("User message cannot be empty")

        messages: list[ChatMessage] = []
        if self.system_message:
            messages.append(ChatMessage(role=ChatRole.SYSTEM, content=self.system_message))
        messages.extend(truncate_chat_history(self._history.snapshot(), self.config.max_tokens))
        user_entry = ChatMessage(role=ChatRole.USER, content=user_message)
        messages.append(user_entry)

        payload = build_request_payload(messages, self.response_format, self.model_name, self.model_params)
        key = make_cache_key(payload.messages, payload.model, payload.model_params)

        cached = self._cache.get(key)
        if cached is not None:
            logger.info("Using cached chat response")
            response = cached.response
        else:
            completion = await self._client.complete(payload, cancel_event=cancel_event)
            response = parse_response(completion, self.response_format)
            self._cache.set(key, response)

        await self._history.append(user_entry, ChatMessage(role=ChatRole.ASSISTANT, content=response.message_text))
        return response

    async def try_generate_structured(
        self, source_text: str, cancel_event: asyncio.Event | None = None
    ) -> GatewayResult[FlashcardProposal]:
        """Like ``generate_structured`` but returns the error instead of raising it."""
        return await self._as_result(lambda: self.generate_structured(source_text, cancel_event))

    async def try_send_chat(
        self, message: str | None = None, cancel_event: asyncio.Event | None = None
    ) -> GatewayResult[ResponsePayload]:
        """Like ``send_chat`` but returns the error instead of raising it."""
        return await self._as_result(lambda: self.send_chat(message, cancel_event))

    async def health_check(self) -> bool:
        return await self._client.health_check()

    async def _guard(self, operation: str, coro: Awaitable[T]) -> T:
        try:
            return await coro
        except Exception as e:
            error = classify_exception(e)
            logger.error("OpenRouter service error", operation=operation, kind=error.kind.value, error=error.message)
            if error is e:
                raise
            raise error from e

    @staticmethod
    async def _as_result(call: Callable[[], Awaitable[T]]) -> GatewayResult[T]:
        try:
            return GatewayResult.success(await call())
        except GatewayError as e:
            return GatewayResult.failure(e)
