"""Tests for provider settings resolution."""

from __future__ import annotations

import pytest

from llmbridge.providers.config import (
    AnthropicConfig,
    ProviderConfig,
    env,
    first_set,
    resolve_max_tokens,
    resolve_settings,
)
from llmbridge.providers.constants import DEFAULT_ANTHROPIC_MAX_TOKENS, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT


class TestFirstSet:
    def test_skips_none_only(self) -> None:
        assert first_set(None, 0, 5) == 0
        assert first_set(None, "", "x") == ""
        assert first_set(None, None) is None


class TestEnv:
    def test_empty_is_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLMBRIDGE_TEST_VAR", "")
        assert env("LLMBRIDGE_TEST_VAR") is None

    def test_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLMBRIDGE_TEST_VAR", "v")
        assert env("LLMBRIDGE_TEST_VAR") == "v"


class TestResolveSettings:
    def test_builtin_fallbacks(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("LLMBRIDGE_KEY", raising=False)
        settings = resolve_settings(
            ProviderConfig(model="m"), None, base_url="https://default/v1", api_key_env=("LLMBRIDGE_KEY",)
        )
        assert settings.base_url == "https://default/v1"
        assert settings.api_key == ""
        assert settings.timeout == DEFAULT_TIMEOUT
        assert settings.max_retries == DEFAULT_MAX_RETRIES
        assert settings.headers == {}

    def test_precedence(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLMBRIDGE_KEY", "from-env")
        monkeypatch.setenv("LLMBRIDGE_URL", "https://env/v1")

        from_env = resolve_settings(
            ProviderConfig(model="m"),
            None,
            base_url="https://default/v1",
            api_key_env=("LLMBRIDGE_KEY",),
            base_url_env=("LLMBRIDGE_URL",),
        )
        assert (from_env.api_key, from_env.base_url) == ("from-env", "https://env/v1")

        from_defaults = resolve_settings(
            ProviderConfig(model="m"),
            {"api_key": "from-defaults", "timeout": 5.0},
            base_url="https://default/v1",
            api_key_env=("LLMBRIDGE_KEY",),
        )
        assert from_defaults.api_key == "from-defaults"
        assert from_defaults.timeout == 5.0

        explicit = resolve_settings(
            ProviderConfig(model="m", api_key="explicit", timeout=1.0, max_retries=0),
            {"api_key": "from-defaults", "timeout": 5.0, "max_retries": 4},
            base_url="https://default/v1",
            api_key_env=("LLMBRIDGE_KEY",),
        )
        assert explicit.api_key == "explicit"
        assert explicit.timeout == 1.0
        assert explicit.max_retries == 0

    def test_env_names_tried_in_order(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("LLMBRIDGE_PRIMARY", raising=False)
        monkeypatch.setenv("LLMBRIDGE_FALLBACK", "fallback")
        settings = resolve_settings(
            ProviderConfig(model="m"),
            None,
            base_url="x",
            api_key_env=("LLMBRIDGE_PRIMARY", "LLMBRIDGE_FALLBACK"),
        )
        assert settings.api_key == "fallback"

    def test_header_merge(self) -> None:
        settings = resolve_settings(
            ProviderConfig(model="m", headers={"X-A": "config"}),
            {"headers": {"X-A": "defaults", "X-B": "defaults"}},
            base_url="x",
            headers={"X-A": "provider", "X-C": "provider"},
        )
        assert settings.headers == {"X-A": "config", "X-B": "defaults", "X-C": "provider"}


class TestResolveMaxTokens:
    def test_order(self) -> None:
        assert resolve_max_tokens(AnthropicConfig(model="c"), None) == DEFAULT_ANTHROPIC_MAX_TOKENS
        assert resolve_max_tokens(AnthropicConfig(model="c"), {"max_tokens": 100}) == 100
        assert resolve_max_tokens(AnthropicConfig(model="c", max_tokens=50), {"max_tokens": 100}) == 50
