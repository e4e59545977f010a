"""OpenAI-compatible completion adapter covering Azure and DeepSeek quirks."""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from typing import Any

from openai import AsyncAzureOpenAI, AsyncOpenAI

from ...config import AdapterConfig
from ..errors import CompletionError
from ..message import Message
from ..models import OPENAI_MODEL_INFO_SANE_DEFAULTS, ModelSelection
from ..retry import with_retry
from .base import ModelAdapter
from .stream import ReasoningEvent, StreamEvent, TextEvent, usage_from_payload
from .utils import (
    coerce_mapping,
    first_choice,
    messages_to_openai,
    messages_to_r1,
    optional_mapping,
    optional_text,
)

LOGGER = logging.getLogger(__name__)

NON_STREAMING_MODEL_IDS = frozenset({"o1", "o1-preview", "o1-mini"})
DEVELOPER_ROLE_MODEL_IDS = frozenset({"o3-mini"})
DEEPSEEK_REASONER_MARKER = "deepseek-reasoner"

StreamBranch = Callable[[str, str, Sequence[Message]], AsyncIterator[StreamEvent]]


def create_openai_client(config: AdapterConfig) -> AsyncOpenAI:
    """Build the SDK transport matching ``config.base_url``.

    Credential validation is left to the SDK constructors.
    """

    if config.is_azure:
        LOGGER.debug("Using Azure OpenAI transport (api_version=%s)", config.resolved_api_version)
        return AsyncAzureOpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            api_version=config.resolved_api_version,
        )

    LOGGER.debug("Using OpenAI transport")
    return AsyncOpenAI(base_url=config.base_url, api_key=config.api_key)


class OpenAICompletionAdapter(ModelAdapter):
    """Translate system prompts and conversation history to chat completions.

    The request shape depends on the configured model:

    * ``o1``, ``o1-preview`` and ``o1-mini`` get one non-streaming request with
      the system prompt sent as a ``user`` message;
    * ``o3-mini`` streams with the system prompt sent as a ``developer``
      message;
    * everything else streams at temperature 0 with a ``system`` message,
      except ids containing ``deepseek-reasoner`` whose history is folded
      into the R1 turn format. Only this default branch surfaces
      ``reasoning_content``.

    The adapter holds no per-request state, so every entry point may be
    invoked again (for example by :func:`~chatbridge.core.retry.with_retry`).
    """

    def __init__(self, config: AdapterConfig, *, client: Any | None = None) -> None:
        self._config = config
        self._client = client if client is not None else create_openai_client(config)

    @property
    def config(self) -> AdapterConfig:
        return self._config

    @property
    def client(self) -> Any:
        return self._client

    def get_model(self) -> ModelSelection:
        return ModelSelection(
            id=self._config.model_id or "",
            info=self._config.model_info or OPENAI_MODEL_INFO_SANE_DEFAULTS,
        )

    def stream_completion(
        self,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[StreamEvent]:
        model_id = self.get_model().id
        branch = self._select_branch(model_id)
        return branch(model_id, system_prompt, messages)

    def create_message(
        self,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[StreamEvent]:
        """Stream a completion, re-attempting it according to the retry policy."""

        retrying = with_retry(self.stream_completion, self._config.retry)
        return retrying(system_prompt, messages)

    async def complete_prompt(self, prompt: str) -> str:
        payload = {
            "model": self.get_model().id,
            "messages": [{"role": "user", "content": prompt}],
        }
        try:
            response = await self._create(payload)
            return _response_text(response)
        except Exception as exc:
            raise CompletionError(str(exc)) from exc

    def _select_branch(self, model_id: str) -> StreamBranch:
        if model_id in NON_STREAMING_MODEL_IDS:
            return self._stream_non_streaming
        if model_id in DEVELOPER_ROLE_MODEL_IDS:
            return self._stream_developer_role
        return self._stream_default

    async def _stream_non_streaming(
        self,
        model_id: str,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[StreamEvent]:
        payload = {
            "model": model_id,
            "messages": [{"role": "user", "content": system_prompt}, *messages_to_openai(messages)],
        }
        LOGGER.debug("Requesting non-streaming completion for %s (%d messages)", model_id, len(messages))
        response = await self._create(payload)

        yield TextEvent(text=_response_text(response))
        mapping = coerce_mapping(response, path="response")
        yield usage_from_payload(optional_mapping(mapping, "usage", path="response"))

    def _stream_developer_role(
        self,
        model_id: str,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[StreamEvent]:
        payload = {
            "model": model_id,
            "messages": [{"role": "developer", "content": system_prompt}, *messages_to_openai(messages)],
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        LOGGER.debug("Requesting developer-role stream for %s (%d messages)", model_id, len(messages))
        return self._stream_events(payload, include_reasoning=False)

    def _stream_default(
        self,
        model_id: str,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[StreamEvent]:
        if DEEPSEEK_REASONER_MARKER in model_id:
            openai_messages = messages_to_r1([Message.user(system_prompt), *messages])
        else:
            openai_messages = [{"role": "system", "content": system_prompt}, *messages_to_openai(messages)]

        payload = {
            "model": model_id,
            "messages": openai_messages,
            "temperature": 0,
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        LOGGER.debug("Requesting stream for %r (%d messages)", model_id, len(messages))
        return self._stream_events(payload, include_reasoning=True)

    async def _stream_events(
        self,
        payload: Mapping[str, Any],
        *,
        include_reasoning: bool,
    ) -> AsyncIterator[StreamEvent]:
        stream = await self._create(payload)
        try:
            async for raw_chunk in stream:
                chunk = coerce_mapping(raw_chunk, path="chunk")
                for event in _chunk_events(chunk, include_reasoning=include_reasoning):
                    yield event
        finally:
            await _close_stream(stream)

    async def _create(self, payload: Mapping[str, Any]) -> Any:
        result = self._client.chat.completions.create(**payload)
        if inspect.isawaitable(result):
            result = await result
        return result


def _chunk_events(chunk: Mapping[str, Any], *, include_reasoning: bool) -> list[StreamEvent]:
    events: list[StreamEvent] = []

    choice = first_choice(chunk, path="chunk")
    delta = optional_mapping(choice, "delta", path="chunk.choices[0]") if choice is not None else None
    if delta is not None:
        content = optional_text(delta, "content", path="delta")
        if content:
            events.append(TextEvent(text=content))

        if include_reasoning:
            reasoning = optional_text(delta, "reasoning_content", path="delta")
            if reasoning:
                events.append(ReasoningEvent(reasoning=reasoning))

    usage = optional_mapping(chunk, "usage", path="chunk")
    if usage is not None:
        events.append(usage_from_payload(usage))
    return events


def _response_text(response: Any) -> str:
    mapping = coerce_mapping(response, path="response")
    choice = first_choice(mapping, path="response")
    if choice is None:
        return ""
    message = optional_mapping(choice, "message", path="response.choices[0]")
    if message is None:
        return ""
    return optional_text(message, "content", path="response.choices[0].message") or ""


async def _close_stream(stream: Any) -> None:
    for closer_name in ("aclose", "close"):
        closer = getattr(stream, closer_name, None)
        if closer is None:
            continue
        result = closer()
        if inspect.isawaitable(result):
            await result
        LOGGER.debug("Closed completion stream")
        return


__all__ = [
    "DEEPSEEK_REASONER_MARKER",
    "DEVELOPER_ROLE_MODEL_IDS",
    "NON_STREAMING_MODEL_IDS",
    "OpenAICompletionAdapter",
    "create_openai_client",
]
