"""ProviderRegistry — name- and pattern-based lookup of provider classes.

The registry is an explicit object handed to whatever constructs providers;
there is no process-wide singleton, so independent registries (one per
application, one per test) never see each other's registrations.
"""

from __future__ import annotations

import logging
from typing import Any

from llmbridge.providers.base import BaseProviderLlm
from llmbridge.providers.errors import ProviderNotFoundError

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Maps provider names to classes and provider-wide default settings.

    Usage::

        registry = ProviderRegistry()
        registry.register(OpenRouterLlm, {"api_key": "sk-or-..."})
        llm = registry.create("anthropic/claude-sonnet-4")
    """

    def __init__(self) -> None:
        self._providers: dict[str, type[BaseProviderLlm]] = {}
        self._defaults: dict[str, dict[str, Any]] = {}

    def register(
        self, llm_cls: type[BaseProviderLlm], defaults: dict[str, Any] | None = None
    ) -> bool:
        """Register *llm_cls* under its ``provider_name``.

        Registering a name twice keeps the first registration, logs a
        warning, and returns ``False``.
        """
        name = llm_cls.provider_name
        if name in self._providers:
            logger.warning("Provider %r is already registered", name)
            return False
        self._providers[name] = llm_cls
        self._defaults[name] = dict(defaults or {})
        logger.debug("Registered provider %r (%s)", name, llm_cls.__name__)
        return True

    def is_registered(self, name: str) -> bool:
        return name in self._providers

    def defaults(self, name: str) -> dict[str, Any]:
        """Return a copy of the defaults registered for *name*."""
        return dict(self._defaults.get(name, {}))

    def resolve(self, model: str) -> type[BaseProviderLlm]:
        """Return the first registered provider whose patterns match *model*.

        Raises :class:`ProviderNotFoundError` when none does.
        """
        for llm_cls in self._providers.values():
            if llm_cls.supports(model):
                return llm_cls
        raise ProviderNotFoundError(model)

    def create(self, model: str, **options: Any) -> BaseProviderLlm:
        """Resolve and instantiate a provider for *model*."""
        llm_cls = self.resolve(model)
        return llm_cls.from_model(model, defaults=self.defaults(llm_cls.provider_name), **options)

    def reset(self) -> None:
        self._providers.clear()
        self._defaults.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)


def default_registry() -> ProviderRegistry:
    """Return a new registry with the built-in providers.

    Vendor-specific patterns (``gpt-*``, ``grok-*``, ``claude-*``) are
    registered before the AI Gateway, which claims any ``provider/model`` id.
    """
    from llmbridge.providers.ai_gateway import AIGatewayLlm
    from llmbridge.providers.anthropic import AnthropicLlm
    from llmbridge.providers.openai import OpenAILlm
    from llmbridge.providers.xai import XAILlm

    registry = ProviderRegistry()
    for llm_cls in (OpenAILlm, XAILlm, AnthropicLlm, AIGatewayLlm):
        registry.register(llm_cls)
    return registry
