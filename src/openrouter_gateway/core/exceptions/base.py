"""Base exception class for the OpenRouter gateway."""

from typing import Any

from pydantic import ValidationError

from ...domain.enums import ErrorKind


class GatewayError(Exception):
    """Base exception for all gateway errors.

    Also serves as the catch-all wrapper for unexpected failures, tagged
    with ``ErrorKind.GATEWAY``.
    """

    kind: ErrorKind = ErrorKind.GATEWAY

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}
        self.original_error = original_error

    @property
    def retryable(self) -> bool:
        """Whether the retry executor may attempt the request again."""
        return self.kind.retryable

    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.details:
            return f"{self.message}. Details: {self.details}"
        return self.message


def validation_details(error: ValidationError) -> dict[str, Any]:
    """Flatten a pydantic ``ValidationError`` into ``details`` for a gateway error."""
    return {"errors": [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in error.errors()]}
