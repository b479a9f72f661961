"""OpenRouter provider."""

from __future__ import annotations

from typing import Any

from llmbridge.providers.config import OpenRouterConfig, env, first_set, resolve_settings
from llmbridge.providers.constants import (
    OPENROUTER_BASE_URL,
    OPENROUTER_ENV_API_KEY,
    OPENROUTER_ENV_APP_NAME,
    OPENROUTER_ENV_SITE_URL,
    OPENROUTER_MODEL_PATTERNS,
)
from llmbridge.providers.openai_compatible import CompletionFn, OpenAICompatibleLlm


class OpenRouterLlm(OpenAICompatibleLlm):
    """OpenRouter with optional app attribution and provider routing.

    ``site_url``/``app_name`` become the ``HTTP-Referer``/``X-Title``
    ranking headers; ``provider`` is sent as the body's routing preferences.
    """

    provider_name = "openrouter"
    supported_models = OPENROUTER_MODEL_PATTERNS
    config_cls = OpenRouterConfig

    def __init__(
        self,
        config: OpenRouterConfig,
        defaults: dict[str, Any] | None = None,
        *,
        completion: CompletionFn | None = None,
    ) -> None:
        defaults = defaults or {}
        headers: dict[str, str] = {}
        site_url = first_set(config.site_url, defaults.get("site_url"), env(OPENROUTER_ENV_SITE_URL))
        app_name = first_set(config.app_name, defaults.get("app_name"), env(OPENROUTER_ENV_APP_NAME))
        if site_url:
            headers["HTTP-Referer"] = site_url
        if app_name:
            headers["X-Title"] = app_name

        settings = resolve_settings(
            config,
            defaults,
            base_url=OPENROUTER_BASE_URL,
            api_key_env=(OPENROUTER_ENV_API_KEY,),
            headers=headers,
        )
        super().__init__(config, settings, defaults=defaults, completion=completion)
        self._routing = first_set(config.provider, defaults.get("provider"))

    @property
    def error_prefix(self) -> str:
        return "OPENROUTER"

    def provider_request_options(self) -> dict[str, Any]:
        if self._routing:
            return {"provider": self._routing}
        return {}
