"""Core data structures shared by chatbridge adapters."""

from __future__ import annotations

from .errors import AdapterError, CompletionError
from .message import (
    ImageBlock,
    Message,
    MessageRole,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from .models import OPENAI_MODEL_INFO_SANE_DEFAULTS, ModelInfo, ModelSelection
from .retry import RetryPolicy, with_retry

__all__ = [
    "AdapterError",
    "CompletionError",
    "ImageBlock",
    "Message",
    "MessageRole",
    "ModelInfo",
    "ModelSelection",
    "OPENAI_MODEL_INFO_SANE_DEFAULTS",
    "RetryPolicy",
    "TextBlock",
    "ToolResultBlock",
    "ToolUseBlock",
    "with_retry",
]
