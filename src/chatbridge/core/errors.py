"""Custom exception types raised by chatbridge adapters."""

from __future__ import annotations

COMPLETION_ERROR_PREFIX = "OpenAI completion error: "


class AdapterError(RuntimeError):
    """Raised when an adapter cannot fulfil a request."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class CompletionError(AdapterError):
    """Raised when a single-shot completion request fails at the transport."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{COMPLETION_ERROR_PREFIX}{detail}")
