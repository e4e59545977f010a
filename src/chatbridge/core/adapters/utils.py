"""Pure conversion helpers shared by adapter implementations."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from ..errors import AdapterError
from ..message import (
    ImageBlock,
    Message,
    MessageRole,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    thaw_json_structure,
)

TOOL_RESULT_IMAGE_PLACEHOLDER = "(see following user message for image)"


def messages_to_openai(messages: Sequence[Message]) -> list[dict[str, Any]]:
    """Convert host messages into the OpenAI Chat API format."""

    converted: list[dict[str, Any]] = []
    for message in messages:
        if isinstance(message.content, str):
            converted.append({"role": message.role.value, "content": message.content})
        elif message.role is MessageRole.USER:
            converted.extend(_user_blocks_to_openai(message.content))
        else:
            converted.append(_assistant_blocks_to_openai(message.content))
    return converted


def _user_blocks_to_openai(blocks: Sequence[Any]) -> list[dict[str, Any]]:
    entries: list[dict[str, Any]] = []
    parts: list[dict[str, Any]] = []
    carried_images: list[ImageBlock] = []

    for block in blocks:
        if isinstance(block, ToolResultBlock):
            content, images = _tool_result_content(block)
            carried_images.extend(images)
            entries.append({"role": "tool", "tool_call_id": block.tool_use_id, "content": content})
        elif isinstance(block, TextBlock):
            parts.append(_text_part(block.text))
        elif isinstance(block, ImageBlock):
            parts.append(_image_part(block))

    # tool entries come first; images they referenced follow in the user entry
    parts.extend(_image_part(image) for image in carried_images)
    if parts:
        entries.append({"role": "user", "content": parts})
    return entries


def _tool_result_content(block: ToolResultBlock) -> tuple[str, list[ImageBlock]]:
    if isinstance(block.content, str):
        return block.content, []

    lines: list[str] = []
    images: list[ImageBlock] = []
    for part in block.content:
        if isinstance(part, ImageBlock):
            images.append(part)
            lines.append(TOOL_RESULT_IMAGE_PLACEHOLDER)
        else:
            lines.append(part.text)
    return "\n".join(lines), images


def _assistant_blocks_to_openai(blocks: Sequence[Any]) -> dict[str, Any]:
    texts = [block.text for block in blocks if isinstance(block, TextBlock)]
    tool_calls = [_tool_use_to_openai(block) for block in blocks if isinstance(block, ToolUseBlock)]

    payload: dict[str, Any] = {
        "role": "assistant",
        "content": "\n".join(texts) if texts else None,
    }
    if tool_calls:
        payload["tool_calls"] = tool_calls
    return payload


def _tool_use_to_openai(block: ToolUseBlock) -> dict[str, Any]:
    return {
        "id": block.id,
        "type": "function",
        "function": {
            "name": block.name,
            "arguments": json.dumps(thaw_json_structure(block.input)),
        },
    }


def messages_to_r1(messages: Sequence[Message]) -> list[dict[str, Any]]:
    """Convert host messages into the merged-turn format DeepSeek R1 expects.

    Consecutive messages with the same role are folded into one entry, and any
    non-assistant role is sent as ``user``. Tool blocks have no equivalent and
    are dropped.
    """

    merged: list[dict[str, Any]] = []
    for message in messages:
        role = "assistant" if message.role is MessageRole.ASSISTANT else "user"
        content = _r1_content(message.content)

        if merged and merged[-1]["role"] == role:
            last = merged[-1]
            if isinstance(last["content"], str) and isinstance(content, str):
                last["content"] = f"{last['content']}\n{content}"
            else:
                last["content"] = _as_parts(last["content"]) + _as_parts(content)
            continue

        merged.append({"role": role, "content": content})
    return merged


def _r1_content(content: str | Sequence[Any]) -> str | list[dict[str, Any]]:
    if isinstance(content, str):
        return content

    texts = [block.text for block in content if isinstance(block, TextBlock)]
    images = [block for block in content if isinstance(block, ImageBlock)]
    if not images:
        return "\n".join(texts)
    return [_text_part(text) for text in texts] + [_image_part(image) for image in images]


def _as_parts(content: str | list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    if isinstance(content, list):
        return list(content)
    return [_text_part(content or "")]


def _text_part(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}


def _image_part(image: ImageBlock) -> dict[str, Any]:
    return {"type": "image_url", "image_url": {"url": image.data_url}}


def coerce_mapping(item: Mapping[str, Any] | Any, *, path: str = "payload") -> Mapping[str, Any]:
    """Return a read-only mapping view of an SDK model or plain mapping."""

    if isinstance(item, Mapping):
        return item

    if hasattr(item, "model_dump"):
        dump = getattr(item, "model_dump")
        result = dump()
        if isinstance(result, Mapping):
            return result

    if hasattr(item, "__dict__"):
        return vars(item)

    msg = f"{path} must be a mapping"
    raise AdapterError(msg)


def optional_mapping(container: Mapping[str, Any], key: str, *, path: str) -> Mapping[str, Any] | None:
    """Fetch ``container[key]`` as a mapping, or ``None`` when absent."""

    value = container.get(key)
    if value is None:
        return None
    return coerce_mapping(value, path=f"{path}.{key}")


def first_choice(container: Mapping[str, Any], *, path: str) -> Mapping[str, Any] | None:
    """Return the first entry of ``container['choices']``, if any."""

    choices = container.get("choices")
    if choices is None:
        return None
    if not isinstance(choices, Sequence) or isinstance(choices, (str, bytes, bytearray)):
        msg = f"{path}.choices must be a sequence"
        raise AdapterError(msg)
    if not choices:
        return None
    return coerce_mapping(choices[0], path=f"{path}.choices[0]")


def optional_text(container: Mapping[str, Any], key: str, *, path: str) -> str | None:
    """Fetch a text field that providers may omit or send as ``null``."""

    value = container.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"{path}.{key} must be a string when present"
        raise AdapterError(msg)
    return value
