"""Utility helpers."""

from .text import combine_messages, create_system_message, detect_language, sanitize_input

__all__ = ["sanitize_input", "create_system_message", "combine_messages", "detect_language"]
