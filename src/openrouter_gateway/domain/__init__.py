"""Domain layer - enums shared across the gateway."""

from .enums import ChatRole, Difficulty, ErrorKind

__all__ = ["ChatRole", "Difficulty", "ErrorKind"]
