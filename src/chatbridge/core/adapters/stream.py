"""Canonical streaming event schema and consumer helpers."""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, AsyncIterator, ClassVar, List, Literal, Union


@dataclass(frozen=True, slots=True)
class TextEvent:
    """Fragment of the assistant's answer text."""

    type: ClassVar[Literal["text"]] = "text"

    text: str


@dataclass(frozen=True, slots=True)
class ReasoningEvent:
    """Fragment of provider-exposed intermediate reasoning."""

    type: ClassVar[Literal["reasoning"]] = "reasoning"

    reasoning: str


@dataclass(frozen=True, slots=True)
class UsageEvent:
    """Token accounting reported by the provider.

    Counts are always integers; providers that omit a count report ``0``.
    A stream may carry any number of usage events, usually one at the end.
    """

    type: ClassVar[Literal["usage"]] = "usage"

    input_tokens: int = 0
    output_tokens: int = 0


StreamEvent = Union[TextEvent, ReasoningEvent, UsageEvent]


def usage_from_payload(payload: Mapping[str, Any] | None) -> UsageEvent:
    """Build a :class:`UsageEvent` from an OpenAI ``usage`` mapping."""

    if not payload:
        return UsageEvent()
    return UsageEvent(
        input_tokens=_token_count(payload.get("prompt_tokens")),
        output_tokens=_token_count(payload.get("completion_tokens")),
    )


def _token_count(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


async def collect_stream(events: AsyncIterator[StreamEvent]) -> List[StreamEvent]:
    """Collect every event from ``events`` and close the iterator afterwards."""

    collected: List[StreamEvent] = []
    try:
        async for event in events:
            collected.append(event)
    finally:
        closer = getattr(events, "aclose", None)
        if closer is not None:
            result = closer()
            if inspect.isawaitable(result):
                await result
    return collected


def render_text(events: List[StreamEvent]) -> str:
    """Concatenate the text fragments of a collected stream."""

    return "".join(event.text for event in events if isinstance(event, TextEvent))


__all__ = [
    "ReasoningEvent",
    "StreamEvent",
    "TextEvent",
    "UsageEvent",
    "collect_stream",
    "render_text",
    "usage_from_payload",
]
