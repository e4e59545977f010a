"""Adapter interfaces and provider implementations."""

from __future__ import annotations

from .base import ModelAdapter
from .openai import OpenAICompletionAdapter, create_openai_client
from .stream import (
    ReasoningEvent,
    StreamEvent,
    TextEvent,
    UsageEvent,
    collect_stream,
    render_text,
)
from .utils import messages_to_openai, messages_to_r1

__all__ = [
    "ModelAdapter",
    "OpenAICompletionAdapter",
    "ReasoningEvent",
    "StreamEvent",
    "TextEvent",
    "UsageEvent",
    "collect_stream",
    "create_openai_client",
    "messages_to_openai",
    "messages_to_r1",
    "render_text",
]
