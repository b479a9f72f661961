"""Vercel AI Gateway provider (``provider/model`` identifiers)."""

from __future__ import annotations

from typing import Any

from llmbridge.providers.config import ProviderConfig, resolve_settings
from llmbridge.providers.constants import (
    AI_GATEWAY_BASE_URL,
    AI_GATEWAY_ENV_API_KEY,
    AI_GATEWAY_ENV_URL,
    AI_GATEWAY_MODEL_PATTERNS,
    OPENAI_ENV_API_KEY,
    OPENAI_ENV_BASE_URL,
)
from llmbridge.providers.openai_compatible import CompletionFn, OpenAICompatibleLlm


class AIGatewayLlm(OpenAICompatibleLlm):
    """Routes ``anthropic/claude-sonnet-4``-style model ids through the gateway.

    Falls back to the ``OPENAI_*`` environment variables when the gateway's
    own are unset.
    """

    provider_name = "ai-gateway"
    supported_models = AI_GATEWAY_MODEL_PATTERNS

    def __init__(
        self,
        config: ProviderConfig,
        defaults: dict[str, Any] | None = None,
        *,
        completion: CompletionFn | None = None,
    ) -> None:
        settings = resolve_settings(
            config,
            defaults,
            base_url=AI_GATEWAY_BASE_URL,
            api_key_env=(AI_GATEWAY_ENV_API_KEY, OPENAI_ENV_API_KEY),
            base_url_env=(AI_GATEWAY_ENV_URL, OPENAI_ENV_BASE_URL),
        )
        super().__init__(config, settings, defaults=defaults, completion=completion)

    @property
    def error_prefix(self) -> str:
        return "AI_GATEWAY"
