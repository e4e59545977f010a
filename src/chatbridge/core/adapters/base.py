"""Adapter interface shared by provider implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence

from ..message import Message
from ..models import ModelSelection
from .stream import StreamEvent


class ModelAdapter(ABC):
    """Abstract interface for provider-specific completion adapters."""

    @abstractmethod
    def stream_completion(
        self,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[StreamEvent]:
        """Stream canonical events for a system prompt and conversation history."""

    @abstractmethod
    def get_model(self) -> ModelSelection:
        """Return the configured model identifier and its metadata."""

    @abstractmethod
    async def complete_prompt(self, prompt: str) -> str:
        """Return a one-shot completion for a bare prompt."""
