"""Tests for the Anthropic Messages provider and its HTTP transport."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest

from llmbridge.core.models import LlmResponse
from llmbridge.providers.anthropic import (
    AnthropicLlm,
    HttpMessagesTransport,
    _error_detail,
    iter_sse_events,
)
from llmbridge.providers.config import AnthropicConfig, ClientSettings
from llmbridge.providers.errors import MessagesApiError
from tests.providers.conftest import USER_HELLO, aiter_items

_STREAM_EVENTS: list[dict[str, Any]] = [
    {"type": "message_start", "message": {"id": "msg_1", "usage": {"input_tokens": 5}}},
    {"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}},
    {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Bon"}},
    {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "jour"}},
    {"type": "content_block_stop", "index": 0},
    {"type": "message_stop"},
]


class FakeTransport:
    def __init__(
        self,
        message: dict[str, Any] | None = None,
        events: list[dict[str, Any]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.message = message or {}
        self.events = events or []
        self.error = error
        self.bodies: list[dict[str, Any]] = []
        self.stream_closed = False

    async def create(self, body: dict[str, Any]) -> dict[str, Any]:
        self.bodies.append(body)
        if self.error is not None:
            raise self.error
        return self.message

    async def stream(self, body: dict[str, Any]) -> AsyncGenerator[dict[str, Any], None]:
        self.bodies.append(body)
        if self.error is not None:
            raise self.error
        try:
            for event in self.events:
                yield event
        finally:
            self.stream_closed = True


async def _collect(llm: AnthropicLlm, stream: bool = False) -> list[LlmResponse]:
    return [r async for r in llm.generate_content_async(USER_HELLO, stream=stream)]


class TestAnthropicLlm:
    def test_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        llm = AnthropicLlm(AnthropicConfig(model="claude-sonnet-4"), transport=FakeTransport())
        assert llm.settings.api_key == "sk-ant"
        assert llm.settings.base_url == "https://api.anthropic.com/v1"
        assert llm.max_tokens == 4096
        assert llm.error_prefix == "ANTHROPIC"
        assert llm.dialect == "anthropic"

    def test_build_request(self) -> None:
        llm = AnthropicLlm(AnthropicConfig(model="claude-sonnet-4", max_tokens=512), transport=FakeTransport())
        body = llm.build_request(
            {
                "contents": USER_HELLO["contents"],
                "config": {"systemInstruction": "Reply in French."},
            }
        )
        assert body == {
            "model": "claude-sonnet-4",
            "max_tokens": 512,
            "messages": [{"role": "user", "content": "Hello"}],
            "system": "Reply in French.",
        }

    async def test_single(self) -> None:
        transport = FakeTransport(
            message={
                "content": [{"type": "text", "text": "Bonjour"}],
                "usage": {"input_tokens": 5, "output_tokens": 2},
            }
        )
        llm = AnthropicLlm(AnthropicConfig(model="claude-sonnet-4"), transport=transport)

        (response,) = await _collect(llm)

        assert response.text == "Bonjour"
        assert response.usage_metadata is not None
        assert response.usage_metadata.total_token_count == 7
        assert "stream" not in transport.bodies[0]

    async def test_stream(self) -> None:
        transport = FakeTransport(events=_STREAM_EVENTS)
        llm = AnthropicLlm(AnthropicConfig(model="claude-sonnet-4"), transport=transport)

        responses = await _collect(llm, stream=True)

        assert transport.bodies[0]["stream"] is True
        assert [(r.text, r.turn_complete) for r in responses] == [
            ("Bon", False),
            ("jour", False),
            ("Bonjour", True),
        ]

    async def test_stream_closed_after_message_stop(self) -> None:
        transport = FakeTransport(events=[*_STREAM_EVENTS, {"type": "ping"}])
        llm = AnthropicLlm(AnthropicConfig(model="claude-sonnet-4"), transport=transport)

        responses = await _collect(llm, stream=True)

        assert responses[-1].turn_complete is True
        assert transport.stream_closed is True

    async def test_api_error(self) -> None:
        transport = FakeTransport(error=MessagesApiError(529, "Overloaded"))
        llm = AnthropicLlm(AnthropicConfig(model="claude-sonnet-4"), transport=transport)

        (response,) = await _collect(llm)

        assert response.error_code == "API_ERROR_529"
        assert response.error_message == "Messages API returned HTTP 529: Overloaded"

    async def test_plain_error(self) -> None:
        transport = FakeTransport(error=RuntimeError("dns failure"))
        llm = AnthropicLlm(AnthropicConfig(model="claude-sonnet-4"), transport=transport)
        responses = await _collect(llm, stream=True)
        assert responses[-1].error_code == "ANTHROPIC_ERROR"

    def test_supports(self) -> None:
        assert AnthropicLlm.supports("claude-3-5-haiku")
        assert not AnthropicLlm.supports("anthropic/claude-sonnet-4")


class TestIterSseEvents:
    async def test_decodes_data_lines(self) -> None:
        lines = [
            "event: message_start",
            'data: {"type": "message_start"}',
            "",
            ": keep-alive",
            "data:",
            "data: not-json",
            'data: {"type": "message_stop"}',
            "data: [1, 2]",
        ]
        events = [e async for e in iter_sse_events(aiter_items(lines))]
        assert events == [{"type": "message_start"}, {"type": "message_stop"}]


class TestErrorDetail:
    def test_error_message_extracted(self) -> None:
        body = json.dumps({"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}})
        assert _error_detail(body) == "Overloaded"

    def test_raw_text_kept(self) -> None:
        assert _error_detail("<html>bad gateway</html>") == "<html>bad gateway</html>"
        assert _error_detail('{"detail": "x"}') == '{"detail": "x"}'


def _mock_transport(
    handler: Any, monkeypatch: pytest.MonkeyPatch, settings: ClientSettings
) -> HttpMessagesTransport:
    transport = HttpMessagesTransport(settings)
    real_client = transport._client

    def client() -> httpx.AsyncClient:
        configured = real_client()
        return httpx.AsyncClient(
            base_url=configured.base_url,
            headers=configured.headers,
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(transport, "_client", client)
    return transport


class TestHttpMessagesTransport:
    async def test_create(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"content": [{"type": "text", "text": "hi"}]})

        settings = ClientSettings(base_url="https://api.anthropic.com/v1/", api_key="sk-ant")
        transport = _mock_transport(handler, monkeypatch, settings)

        message = await transport.create({"model": "claude-x", "max_tokens": 1, "messages": []})

        assert message["content"][0]["text"] == "hi"
        request = seen[0]
        assert request.url == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "sk-ant"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert json.loads(request.content)["model"] == "claude-x"

    async def test_create_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": {"message": "invalid x-api-key"}})

        transport = _mock_transport(handler, monkeypatch, ClientSettings(base_url="https://h/v1"))

        with pytest.raises(MessagesApiError) as exc_info:
            await transport.create({})
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "invalid x-api-key"

    async def test_stream(self, monkeypatch: pytest.MonkeyPatch) -> None:
        body = "".join(f"event: {e['type']}\ndata: {json.dumps(e)}\n\n" for e in _STREAM_EVENTS)

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, content=body.encode(), headers={"content-type": "text/event-stream"}
            )

        transport = _mock_transport(handler, monkeypatch, ClientSettings(base_url="https://h/v1"))

        events = [e async for e in transport.stream({"stream": True})]

        assert [e["type"] for e in events] == [e["type"] for e in _STREAM_EVENTS]

    async def test_stream_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="upstream exploded")

        transport = _mock_transport(handler, monkeypatch, ClientSettings(base_url="https://h/v1"))

        with pytest.raises(MessagesApiError, match="upstream exploded"):
            async for _ in transport.stream({}):
                pass
