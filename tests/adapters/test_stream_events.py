from __future__ import annotations

import asyncio
from dataclasses import FrozenInstanceError, is_dataclass

import pytest

from chatbridge.core.adapters.stream import (
    ReasoningEvent,
    TextEvent,
    UsageEvent,
    collect_stream,
    render_text,
    usage_from_payload,
)


def test_event_dataclasses_are_slot_based() -> None:
    for cls, expected_slots in (
        (TextEvent, {"text"}),
        (ReasoningEvent, {"reasoning"}),
        (UsageEvent, {"input_tokens", "output_tokens"}),
    ):
        assert is_dataclass(cls)
        assert set(getattr(cls, "__slots__")) == expected_slots


def test_events_carry_discriminators() -> None:
    assert TextEvent("a").type == "text"
    assert ReasoningEvent("b").type == "reasoning"
    assert UsageEvent().type == "usage"


def test_events_are_immutable() -> None:
    event = TextEvent("a")
    with pytest.raises(FrozenInstanceError):
        event.text = "b"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        (None, UsageEvent(0, 0)),
        ({}, UsageEvent(0, 0)),
        ({"prompt_tokens": None, "completion_tokens": None}, UsageEvent(0, 0)),
        ({"prompt_tokens": 10}, UsageEvent(10, 0)),
        ({"completion_tokens": 4}, UsageEvent(0, 4)),
        ({"prompt_tokens": "12", "completion_tokens": 3, "total_tokens": 15}, UsageEvent(12, 3)),
        ({"prompt_tokens": "n/a", "completion_tokens": True}, UsageEvent(0, 0)),
    ],
)
def test_usage_from_payload_normalizes_counts(payload, expected) -> None:
    assert usage_from_payload(payload) == expected


class _Events:
    def __init__(self, events) -> None:
        self._events = list(events)
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._events:
            raise StopAsyncIteration
        return self._events.pop(0)

    async def aclose(self) -> None:
        self.closed = True


def test_collect_stream_closes_iterator() -> None:
    source = _Events([TextEvent("a"), ReasoningEvent("r"), TextEvent("b"), UsageEvent(1, 2)])

    events = asyncio.run(collect_stream(source))

    assert len(events) == 4
    assert source.closed
    assert render_text(events) == "ab"
