"""xAI provider (Grok models)."""

from __future__ import annotations

from typing import Any

from llmbridge.providers.config import ProviderConfig, resolve_settings
from llmbridge.providers.constants import XAI_BASE_URL, XAI_ENV_API_KEY, XAI_MODEL_PATTERNS
from llmbridge.providers.openai_compatible import CompletionFn, OpenAICompatibleLlm


class XAILlm(OpenAICompatibleLlm):
    provider_name = "xai"
    supported_models = XAI_MODEL_PATTERNS

    def __init__(
        self,
        config: ProviderConfig,
        defaults: dict[str, Any] | None = None,
        *,
        completion: CompletionFn | None = None,
    ) -> None:
        settings = resolve_settings(
            config, defaults, base_url=XAI_BASE_URL, api_key_env=(XAI_ENV_API_KEY,)
        )
        super().__init__(config, settings, defaults=defaults, completion=completion)

    @property
    def error_prefix(self) -> str:
        return "XAI"
