from __future__ import annotations

import json

from chatbridge.core import (
    ImageBlock,
    Message,
    MessageRole,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from chatbridge.core.adapters.utils import (
    TOOL_RESULT_IMAGE_PLACEHOLDER,
    messages_to_openai,
    messages_to_r1,
)

PNG = ImageBlock(media_type="image/png", data="iVBORw0KGgo=")


def test_string_messages_map_verbatim() -> None:
    messages = [
        Message(role=MessageRole.USER, content="Hello"),
        Message(role=MessageRole.ASSISTANT, content="Hi!"),
    ]

    assert messages_to_openai(messages) == [
        {"role": "user", "content": "Hello"},
        {"role": "assistant", "content": "Hi!"},
    ]


def test_user_blocks_become_content_parts() -> None:
    message = Message.user([TextBlock("Describe this"), PNG])

    assert messages_to_openai([message]) == [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "Describe this"},
                {"type": "image_url", "image_url": {"url": "data:image/png;base64,iVBORw0KGgo="}},
            ],
        }
    ]


def test_tool_results_are_emitted_before_user_content() -> None:
    message = Message.user(
        [
            TextBlock("Thanks"),
            ToolResultBlock(tool_use_id="call_1", content="42"),
            ToolResultBlock(tool_use_id="call_2", content=(TextBlock("screen"), PNG)),
        ]
    )

    converted = messages_to_openai([message])

    assert converted == [
        {"role": "tool", "tool_call_id": "call_1", "content": "42"},
        {
            "role": "tool",
            "tool_call_id": "call_2",
            "content": f"screen\n{TOOL_RESULT_IMAGE_PLACEHOLDER}",
        },
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "Thanks"},
                {"type": "image_url", "image_url": {"url": PNG.data_url}},
            ],
        },
    ]


def test_tool_results_only_produce_no_user_entry() -> None:
    message = Message.user([ToolResultBlock(tool_use_id="call_1")])

    assert messages_to_openai([message]) == [
        {"role": "tool", "tool_call_id": "call_1", "content": ""},
    ]


def test_assistant_tool_use_becomes_tool_calls() -> None:
    message = Message.assistant(
        [
            TextBlock("Let me check."),
            TextBlock("One moment."),
            ToolUseBlock(id="call_1", name="read_file", input={"path": "a.txt", "lines": [1, 2]}),
        ]
    )

    [payload] = messages_to_openai([message])

    assert payload["role"] == "assistant"
    assert payload["content"] == "Let me check.\nOne moment."
    [call] = payload["tool_calls"]
    assert call["id"] == "call_1"
    assert call["type"] == "function"
    assert call["function"]["name"] == "read_file"
    assert json.loads(call["function"]["arguments"]) == {"path": "a.txt", "lines": [1, 2]}


def test_assistant_without_text_has_null_content_and_no_tool_calls_key() -> None:
    message = Message.assistant([PNG])

    assert messages_to_openai([message]) == [{"role": "assistant", "content": None}]


def test_r1_merges_consecutive_roles() -> None:
    messages = [
        Message.user("System rules"),
        Message.user("Question"),
        Message.assistant("Answer"),
        Message.assistant([TextBlock("More"), TextBlock("detail")]),
    ]

    assert messages_to_r1(messages) == [
        {"role": "user", "content": "System rules\nQuestion"},
        {"role": "assistant", "content": "Answer\nMore\ndetail"},
    ]


def test_r1_promotes_strings_when_merging_images() -> None:
    messages = [
        Message.user("Rules"),
        Message.user([TextBlock("Look"), PNG]),
    ]

    assert messages_to_r1(messages) == [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "Rules"},
                {"type": "text", "text": "Look"},
                {"type": "image_url", "image_url": {"url": PNG.data_url}},
            ],
        }
    ]


def test_r1_drops_tool_blocks() -> None:
    messages = [
        Message.assistant([ToolUseBlock(id="call_1", name="noop", input={})]),
        Message.user([ToolResultBlock(tool_use_id="call_1", content="done"), TextBlock("next")]),
    ]

    assert messages_to_r1(messages) == [
        {"role": "assistant", "content": ""},
        {"role": "user", "content": "next"},
    ]


def test_converters_do_not_share_state_between_calls() -> None:
    messages = [Message.user("a"), Message.user("b")]

    first = messages_to_r1(messages)
    first[0]["content"] = "mutated"

    assert messages_to_r1(messages) == [{"role": "user", "content": "a\nb"}]
