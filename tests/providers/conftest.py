"""Shared fixtures and fakes for provider tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from types import SimpleNamespace
from typing import Any

import pytest

from llmbridge.providers import constants

_ENV_VARS = [value for name, value in vars(constants).items() if "_ENV_" in name]


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's real provider credentials out of every test."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def make_completion(
    content: str | None = "",
    tool_calls: list[Any] | None = None,
    usage: tuple[int, int, int] | None = (10, 20, 30),
) -> SimpleNamespace:
    """Build an object shaped like LiteLLM's ``ModelResponse``."""
    message = SimpleNamespace(role="assistant", content=content or None, tool_calls=tool_calls)
    response = SimpleNamespace(
        choices=[SimpleNamespace(index=0, message=message, finish_reason="stop")],
        usage=None,
    )
    if usage is not None:
        prompt, completion, total = usage
        response.usage = SimpleNamespace(
            prompt_tokens=prompt, completion_tokens=completion, total_tokens=total
        )
    return response


def make_tool_call(call_id: str, name: str, arguments: str) -> SimpleNamespace:
    return SimpleNamespace(
        id=call_id, type="function", function=SimpleNamespace(name=name, arguments=arguments)
    )


def make_chunk(
    content: str | None = None,
    tool_calls: list[dict[str, Any]] | None = None,
    finish_reason: str | None = None,
) -> dict[str, Any]:
    delta: dict[str, Any] = {"content": content}
    if tool_calls is not None:
        delta["tool_calls"] = tool_calls
    return {"choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}]}


async def aiter_items(items: list[Any]) -> AsyncIterator[Any]:
    for item in items:
        yield item


USER_HELLO: dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": "Hello"}]}]}
