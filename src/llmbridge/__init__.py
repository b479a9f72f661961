"""llmbridge — adapters between agent-framework LLM requests and vendor chat APIs."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from llmbridge.providers.registry import ProviderRegistry as ProviderRegistry
    from llmbridge.providers.registry import default_registry as default_registry

_PROVIDER_EXPORTS = {
    "ProviderRegistry": "llmbridge.providers.registry",
    "default_registry": "llmbridge.providers.registry",
}


def __getattr__(name: str) -> object:
    module_path = _PROVIDER_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'llmbridge' has no attribute {name!r}")
