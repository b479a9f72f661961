"""Anthropic provider — native Messages API with content blocks.

Unlike the chat-completions providers this one speaks the message-blocks
dialect directly over HTTP. The transport is a small protocol so the HTTP
layer can be swapped out; :class:`HttpMessagesTransport` is the default and
uses httpx, decoding server-sent events into event dicts.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing
from typing import Any, Protocol

import httpx

from llmbridge.core.converters.anthropic import (
    build_messages_request,
    convert_anthropic_request,
    convert_anthropic_response,
    convert_anthropic_stream_event,
    create_anthropic_stream_accumulator,
)
from llmbridge.core.models import LlmRequest, LlmResponse
from llmbridge.providers.base import BaseProviderLlm
from llmbridge.providers.config import (
    AnthropicConfig,
    ClientSettings,
    resolve_max_tokens,
    resolve_settings,
)
from llmbridge.providers.constants import (
    ANTHROPIC_BASE_URL,
    ANTHROPIC_ENV_API_KEY,
    ANTHROPIC_ENV_BASE_URL,
    ANTHROPIC_MODEL_PATTERNS,
    ANTHROPIC_VERSION,
)
from llmbridge.providers.errors import MessagesApiError

logger = logging.getLogger(__name__)


class MessagesTransport(Protocol):
    """Sends Messages API requests."""

    async def create(self, body: dict[str, Any]) -> dict[str, Any]:
        """POST a non-streaming request and return the decoded message."""
        ...

    def stream(self, body: dict[str, Any]) -> AsyncGenerator[dict[str, Any], None]:
        """POST a streaming request and yield decoded stream events."""
        ...


class HttpMessagesTransport:
    """httpx-based :class:`MessagesTransport`.

    Usage::

        transport = HttpMessagesTransport(settings)
        message = await transport.create(body)
    """

    def __init__(self, settings: ClientSettings) -> None:
        self._settings = settings

    def _client(self) -> httpx.AsyncClient:
        headers = {
            "x-api-key": self._settings.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
            **self._settings.headers,
        }
        return httpx.AsyncClient(
            base_url=self._settings.base_url.rstrip("/"),
            headers=headers,
            timeout=self._settings.timeout,
            transport=httpx.AsyncHTTPTransport(retries=self._settings.max_retries),
        )

    async def create(self, body: dict[str, Any]) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.post("/messages", json=body)
            if response.is_error:
                raise MessagesApiError(response.status_code, _error_detail(response.text))
            result: dict[str, Any] = response.json()
            return result

    async def stream(self, body: dict[str, Any]) -> AsyncGenerator[dict[str, Any], None]:
        async with self._client() as client:
            async with client.stream("POST", "/messages", json=body) as response:
                if response.is_error:
                    await response.aread()
                    raise MessagesApiError(response.status_code, _error_detail(response.text))
                async for event in iter_sse_events(response.aiter_lines()):
                    yield event


async def iter_sse_events(lines: AsyncIterator[str]) -> AsyncIterator[dict[str, Any]]:
    """Decode the ``data:`` payloads of a server-sent event stream.

    ``event:`` lines are redundant (each payload carries its own ``type``);
    comments, blank lines, and undecodable payloads are skipped.
    """
    async for line in lines:
        if not line.startswith("data:"):
            continue
        payload = line[len("data:") :].strip()
        if not payload:
            continue
        try:
            event = json.loads(payload)
        except json.JSONDecodeError:
            logger.debug("Skipping undecodable SSE payload: %r", payload)
            continue
        if isinstance(event, dict):
            yield event


def _error_detail(text: str) -> str:
    """Pull ``error.message`` out of an error body, or return it as-is."""
    try:
        body = json.loads(text)
    except json.JSONDecodeError:
        return text
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message", text))
    return text


class AnthropicLlm(BaseProviderLlm):
    """Claude models through the native Messages API."""

    provider_name = "anthropic"
    dialect = "anthropic"
    supported_models = ANTHROPIC_MODEL_PATTERNS
    config_cls = AnthropicConfig

    def __init__(
        self,
        config: AnthropicConfig,
        defaults: dict[str, Any] | None = None,
        *,
        transport: MessagesTransport | None = None,
    ) -> None:
        super().__init__(config, defaults=defaults)
        self.settings = resolve_settings(
            config,
            defaults,
            base_url=ANTHROPIC_BASE_URL,
            api_key_env=(ANTHROPIC_ENV_API_KEY,),
            base_url_env=(ANTHROPIC_ENV_BASE_URL,),
        )
        self.max_tokens = resolve_max_tokens(config, defaults)
        self._transport: MessagesTransport = transport or HttpMessagesTransport(self.settings)

    @property
    def error_prefix(self) -> str:
        return "ANTHROPIC"

    def build_request(self, request: LlmRequest, *, stream: bool = False) -> dict[str, Any]:
        return build_messages_request(
            self.model,
            convert_anthropic_request(request),
            max_tokens=self.max_tokens,
            stream=stream,
        )

    async def _generate_single(self, request: LlmRequest) -> LlmResponse:
        message = await self._transport.create(self.build_request(request))
        return convert_anthropic_response(message)

    async def _generate_stream(self, request: LlmRequest) -> AsyncIterator[LlmResponse]:
        acc = create_anthropic_stream_accumulator()
        events = self._transport.stream(self.build_request(request, stream=True))
        async with aclosing(events):
            async for event in events:
                result = convert_anthropic_stream_event(event, acc)
                if result.response is not None:
                    yield result.response
                if result.is_complete:
                    break
