"""Message schema shared across adapters."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
import json
import math
from types import MappingProxyType
from typing import Any, Union


class MessageRole(str, Enum):
    """Conversation roles a host may attach to a message."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True, slots=True)
class TextBlock:
    """Plain text content."""

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            msg = "text block content must be a string"
            raise TypeError(msg)


@dataclass(frozen=True, slots=True)
class ImageBlock:
    """Inline base64 image content."""

    media_type: str
    data: str

    def __post_init__(self) -> None:
        if not isinstance(self.media_type, str) or not self.media_type:
            msg = "image media_type must be a non-empty string"
            raise ValueError(msg)
        if not isinstance(self.data, str):
            msg = "image data must be a base64 string"
            raise TypeError(msg)

    @property
    def data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"


@dataclass(frozen=True, slots=True)
class ToolUseBlock:
    """A tool invocation requested by the assistant."""

    id: str
    name: str
    input: Mapping[str, Any]

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            msg = "tool use id must be a non-empty string"
            raise ValueError(msg)
        if not isinstance(self.name, str) or not self.name:
            msg = "tool use name must be a non-empty string"
            raise ValueError(msg)
        if not isinstance(self.input, Mapping):
            msg = "tool use input must be a mapping"
            raise TypeError(msg)

        plain_input = thaw_json_structure(self.input)
        _ensure_json_compatible(plain_input, path="ToolUseBlock.input")

        sanitized = json.loads(json.dumps(plain_input, allow_nan=False))
        object.__setattr__(self, "input", _freeze_json_structure(sanitized))


@dataclass(frozen=True, slots=True)
class ToolResultBlock:
    """The output of a tool invocation, reported back by the user."""

    tool_use_id: str
    content: Union[str, tuple["TextBlock | ImageBlock", ...]] = ""

    def __post_init__(self) -> None:
        if not isinstance(self.tool_use_id, str) or not self.tool_use_id:
            msg = "tool_use_id must be a non-empty string"
            raise ValueError(msg)
        if isinstance(self.content, str):
            return
        parts = _as_block_tuple(self.content, allowed=(TextBlock, ImageBlock), owner="tool result")
        object.__setattr__(self, "content", parts)


ContentBlock = Union[TextBlock, ImageBlock, ToolUseBlock, ToolResultBlock]


@dataclass(frozen=True, slots=True)
class Message:
    """A single conversation turn supplied by the host application."""

    role: MessageRole
    content: Union[str, tuple[ContentBlock, ...]]

    def __post_init__(self) -> None:
        if not isinstance(self.role, MessageRole):
            try:
                object.__setattr__(self, "role", MessageRole(self.role))
            except ValueError as exc:
                msg = f"unsupported role {self.role!r}"
                raise ValueError(msg) from exc

        if isinstance(self.content, str):
            return

        blocks = _as_block_tuple(
            self.content,
            allowed=(TextBlock, ImageBlock, ToolUseBlock, ToolResultBlock),
            owner="message",
        )
        if not blocks:
            msg = "message content blocks cannot be empty"
            raise ValueError(msg)
        object.__setattr__(self, "content", blocks)

    @classmethod
    def user(cls, content: Union[str, Sequence[ContentBlock]]) -> "Message":
        return cls(role=MessageRole.USER, content=content)  # type: ignore[arg-type]

    @classmethod
    def assistant(cls, content: Union[str, Sequence[ContentBlock]]) -> "Message":
        return cls(role=MessageRole.ASSISTANT, content=content)  # type: ignore[arg-type]


def _as_block_tuple(value: Any, *, allowed: tuple[type, ...], owner: str) -> tuple[Any, ...]:
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        msg = f"{owner} content must be a string or a sequence of content blocks"
        raise TypeError(msg)
    blocks = tuple(value)
    for block in blocks:
        if not isinstance(block, allowed):
            msg = f"{owner} content contains unsupported block {type(block).__name__}"
            raise TypeError(msg)
    return blocks


def _ensure_json_compatible(value: Any, *, path: str) -> None:
    if isinstance(value, Mapping):
        for key, inner in value.items():
            if not isinstance(key, str) or not key:
                msg = f"{path} keys must be non-empty strings"
                raise TypeError(msg)
            _ensure_json_compatible(inner, path=f"{path}.{key}")
        return

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for index, item in enumerate(value):
            _ensure_json_compatible(item, path=f"{path}[{index}]")
        return

    if isinstance(value, (bool, type(None), str)):
        return

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            msg = f"{path} contains non-finite float values"
            raise ValueError(msg)
        return

    msg = f"{path} contains unsupported value type {type(value).__name__}"
    raise TypeError(msg)


def _freeze_json_structure(value: Any) -> Any:
    if isinstance(value, dict):
        frozen_dict = {key: _freeze_json_structure(inner) for key, inner in value.items()}
        return MappingProxyType(frozen_dict)

    if isinstance(value, list):
        return tuple(_freeze_json_structure(inner) for inner in value)

    return value


def thaw_json_structure(value: Any) -> Any:
    """Return plain ``dict``/``list`` copies of a frozen JSON structure."""

    if isinstance(value, Mapping):
        return {key: thaw_json_structure(inner) for key, inner in value.items()}

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [thaw_json_structure(inner) for inner in value]

    return value
