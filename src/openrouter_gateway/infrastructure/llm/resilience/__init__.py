"""Resilience patterns for completion clients."""

from .retry import RetryableClient, RetryConfig, compute_backoff_ms, retry_with_backoff

__all__ = ["RetryConfig", "RetryableClient", "compute_backoff_ms", "retry_with_backoff"]
