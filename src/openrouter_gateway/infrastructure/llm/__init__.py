"""Infrastructure layer - completion clients and request/response handling."""

from .clients import BaseCompletionClient, MockCompletionClient, MockConfig, OpenRouterClient
from .error_classifier import classify_exception, classify_status
from .factory import create_client
from .payload_builder import build_request_payload, create_json_schema, normalize_model_name
from .resilience import RetryableClient, RetryConfig, compute_backoff_ms, retry_with_backoff
from .response_parser import decode_json_content, extract_json_block, parse_flashcard, parse_response, validate_completion

__all__ = [
    # Clients
    "BaseCompletionClient",
    "OpenRouterClient",
    "MockCompletionClient",
    "MockConfig",
    "create_client",
    # Request/response handling
    "build_request_payload",
    "create_json_schema",
    "normalize_model_name",
    "validate_completion",
    "parse_response",
    "parse_flashcard",
    "decode_json_content",
    "extract_json_block",
    # Error classification
    "classify_status",
    "classify_exception",
    # Resilience
    "RetryConfig",
    "RetryableClient",
    "compute_backoff_ms",
    "retry_with_backoff",
]
