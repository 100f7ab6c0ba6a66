"""Error types raised by the reconstruction pipeline."""

from __future__ import annotations

from typing import Any


class InputError(TypeError):
    """Raised when a pipeline operation receives something other than ``str``."""

    def __init__(self, operation: str, value: Any) -> None:
        self.operation = operation
        self.received = type(value).__name__
        super().__init__(f"{operation} expects str input, got {self.received}")


def require_text(value: Any, operation: str) -> str:
    """Return ``value`` unchanged when it is text; raise :class:`InputError` otherwise."""

    if not isinstance(value, str):
        raise InputError(operation, value)
    return value
