"""OpenAI provider (``gpt-*``, ``o1``-style and ``chatgpt-*`` models)."""

from __future__ import annotations

from typing import Any

from llmbridge.providers.config import OpenAIConfig, env, first_set, resolve_settings
from llmbridge.providers.constants import (
    OPENAI_BASE_URL,
    OPENAI_ENV_API_KEY,
    OPENAI_ENV_ORGANIZATION,
    OPENAI_ENV_PROJECT,
    OPENAI_MODEL_PATTERNS,
)
from llmbridge.providers.openai_compatible import CompletionFn, OpenAICompatibleLlm


class OpenAILlm(OpenAICompatibleLlm):
    provider_name = "openai"
    supported_models = OPENAI_MODEL_PATTERNS
    config_cls = OpenAIConfig

    def __init__(
        self,
        config: OpenAIConfig,
        defaults: dict[str, Any] | None = None,
        *,
        completion: CompletionFn | None = None,
    ) -> None:
        defaults = defaults or {}
        headers: dict[str, str] = {}
        organization = first_set(
            config.organization, defaults.get("organization"), env(OPENAI_ENV_ORGANIZATION)
        )
        project = first_set(config.project, defaults.get("project"), env(OPENAI_ENV_PROJECT))
        if organization:
            headers["OpenAI-Organization"] = organization
        if project:
            headers["OpenAI-Project"] = project

        settings = resolve_settings(
            config,
            defaults,
            base_url=OPENAI_BASE_URL,
            api_key_env=(OPENAI_ENV_API_KEY,),
            headers=headers,
        )
        super().__init__(config, settings, defaults=defaults, completion=completion)

    @property
    def error_prefix(self) -> str:
        return "OPENAI"
