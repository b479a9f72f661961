"""CustomLlm — any OpenAI-compatible endpoint (local servers, proxies, ...)."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlencode

from llmbridge.providers.config import CustomLlmConfig, resolve_settings
from llmbridge.providers.openai_compatible import CompletionFn, OpenAICompatibleLlm


def append_query_params(base_url: str, params: dict[str, str] | None) -> str:
    """Append *params* to *base_url*, keeping any query it already has."""
    if not params:
        return base_url
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode(params)}"


class CustomLlm(OpenAICompatibleLlm):
    """Matches every model id; construct it directly with an explicit base URL."""

    provider_name = "custom"
    supported_models = (r".*",)
    config_cls = CustomLlmConfig

    def __init__(
        self,
        config: CustomLlmConfig,
        defaults: dict[str, Any] | None = None,
        *,
        completion: CompletionFn | None = None,
    ) -> None:
        endpoint = config.model_copy(
            update={"base_url": append_query_params(config.base_url, config.query_params)}
        )
        settings = resolve_settings(endpoint, defaults, base_url=endpoint.base_url)
        super().__init__(config, settings, defaults=defaults, completion=completion)
        self._name = config.name or "CUSTOM"
        self._options = dict(config.provider_options or {})

    @property
    def error_prefix(self) -> str:
        sanitized = re.sub(r"[^A-Z0-9]", "_", self._name.upper())
        return sanitized or "CUSTOM"

    def provider_request_options(self) -> dict[str, Any]:
        return dict(self._options)
