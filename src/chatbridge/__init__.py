"""Adapters that stream chat completions from OpenAI-compatible APIs.

The package turns a system prompt plus a host conversation into requests for
OpenAI, Azure OpenAI and DeepSeek endpoints, and normalizes the replies into
text, reasoning and usage events.
"""

from __future__ import annotations

from .config import AZURE_OPENAI_DEFAULT_API_VERSION, AdapterConfig
from .core import (
    AdapterError,
    CompletionError,
    ImageBlock,
    Message,
    MessageRole,
    ModelInfo,
    ModelSelection,
    OPENAI_MODEL_INFO_SANE_DEFAULTS,
    RetryPolicy,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    with_retry,
)
from .core.adapters import (
    ModelAdapter,
    OpenAICompletionAdapter,
    ReasoningEvent,
    StreamEvent,
    TextEvent,
    UsageEvent,
)

__all__ = [
    "AZURE_OPENAI_DEFAULT_API_VERSION",
    "AdapterConfig",
    "AdapterError",
    "CompletionError",
    "ImageBlock",
    "Message",
    "MessageRole",
    "ModelAdapter",
    "ModelInfo",
    "ModelSelection",
    "OPENAI_MODEL_INFO_SANE_DEFAULTS",
    "OpenAICompletionAdapter",
    "ReasoningEvent",
    "RetryPolicy",
    "StreamEvent",
    "TextBlock",
    "TextEvent",
    "ToolResultBlock",
    "ToolUseBlock",
    "UsageEvent",
    "with_retry",
]

__version__ = "0.1.0"
