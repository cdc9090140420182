"""Success/error union returned by the non-raising service operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from ..core.exceptions import GatewayError
from ..domain.enums import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class GatewayResult(Generic[T]):
    """Either a value or a classified gateway error, never both."""

    value: T | None = None
    error: GatewayError | None = None

    @classmethod
    def success(cls, value: T) -> GatewayResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: GatewayError) -> GatewayResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
