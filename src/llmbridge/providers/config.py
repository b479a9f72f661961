"""Provider configuration — explicit settings resolved against defaults.

Every provider resolves its client settings in the same order: the value on
the provider config, then the defaults registered with the
:class:`~llmbridge.providers.registry.ProviderRegistry`, then environment
variables, then the built-in constant.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field

from llmbridge.providers.constants import DEFAULT_ANTHROPIC_MAX_TOKENS, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT


class ProviderConfig(BaseModel):
    """Configuration for one model on one provider.

    ``timeout`` is in seconds.
    """

    model: str
    api_key: str | None = None
    base_url: str | None = None
    timeout: float | None = None
    max_retries: int | None = None
    headers: dict[str, str] = Field(default_factory=lambda: dict[str, str]())


class OpenAIConfig(ProviderConfig):
    organization: str | None = None
    project: str | None = None


class OpenRouterConfig(ProviderConfig):
    site_url: str | None = None
    app_name: str | None = None
    provider: dict[str, Any] | None = None


class CustomLlmConfig(ProviderConfig):
    """Any OpenAI-compatible endpoint; ``base_url`` is required."""

    base_url: str
    name: str | None = None
    query_params: dict[str, str] | None = None
    provider_options: dict[str, Any] | None = None


class AnthropicConfig(ProviderConfig):
    max_tokens: int | None = None


class ClientSettings(BaseModel):
    """Fully resolved transport settings handed to the conversion layer."""

    base_url: str
    api_key: str = ""
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    headers: dict[str, str] = Field(default_factory=lambda: dict[str, str]())


def first_set(*values: Any) -> Any:
    """Return the first value that is not ``None``."""
    for value in values:
        if value is not None:
            return value
    return None


def env(name: str) -> str | None:
    """Read an environment variable, treating empty strings as unset."""
    return os.environ.get(name) or None


def resolve_settings(
    config: ProviderConfig,
    defaults: dict[str, Any] | None,
    *,
    base_url: str,
    api_key_env: tuple[str, ...] = (),
    base_url_env: tuple[str, ...] = (),
    headers: dict[str, str] | None = None,
) -> ClientSettings:
    """Resolve *config* into :class:`ClientSettings`.

    Args:
        config: Explicit per-instance configuration.
        defaults: Provider-wide defaults from the registry.
        base_url: The built-in endpoint used when nothing else is set.
        api_key_env: Environment variables consulted for the API key, in order.
        base_url_env: Environment variables consulted for the base URL, in order.
        headers: Provider-specific headers; ``config.headers`` wins on conflict.
    """
    defaults = defaults or {}
    merged_headers = {**(headers or {}), **defaults.get("headers", {}), **config.headers}
    return ClientSettings(
        base_url=first_set(
            config.base_url,
            defaults.get("base_url"),
            *(env(name) for name in base_url_env),
            base_url,
        ),
        api_key=first_set(
            config.api_key,
            defaults.get("api_key"),
            *(env(name) for name in api_key_env),
            "",
        ),
        timeout=first_set(config.timeout, defaults.get("timeout"), DEFAULT_TIMEOUT),
        max_retries=first_set(config.max_retries, defaults.get("max_retries"), DEFAULT_MAX_RETRIES),
        headers=merged_headers,
    )


def resolve_max_tokens(config: AnthropicConfig, defaults: dict[str, Any] | None) -> int:
    return first_set(config.max_tokens, (defaults or {}).get("max_tokens"), DEFAULT_ANTHROPIC_MAX_TOKENS)
