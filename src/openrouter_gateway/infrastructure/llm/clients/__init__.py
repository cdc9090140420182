"""Completion client implementations."""

from .base_client import BaseCompletionClient
from .mock_client import MockCompletionClient, MockConfig
from .openrouter_client import OpenRouterClient

__all__ = ["BaseCompletionClient", "MockCompletionClient", "MockConfig", "OpenRouterClient"]
