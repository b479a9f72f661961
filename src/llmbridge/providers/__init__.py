"""Provider implementations, configuration, and registry."""

from llmbridge.providers.ai_gateway import AIGatewayLlm
from llmbridge.providers.anthropic import AnthropicLlm, HttpMessagesTransport, MessagesTransport
from llmbridge.providers.base import BaseProviderLlm, create_error_response
from llmbridge.providers.config import (
    AnthropicConfig,
    ClientSettings,
    CustomLlmConfig,
    OpenAIConfig,
    OpenRouterConfig,
    ProviderConfig,
)
from llmbridge.providers.custom import CustomLlm
from llmbridge.providers.errors import MessagesApiError, ProviderError, ProviderNotFoundError
from llmbridge.providers.openai import OpenAILlm
from llmbridge.providers.openai_compatible import OpenAICompatibleLlm
from llmbridge.providers.openrouter import OpenRouterLlm
from llmbridge.providers.registry import ProviderRegistry, default_registry
from llmbridge.providers.xai import XAILlm

__all__ = [
    "AIGatewayLlm",
    "AnthropicConfig",
    "AnthropicLlm",
    "BaseProviderLlm",
    "ClientSettings",
    "CustomLlm",
    "CustomLlmConfig",
    "HttpMessagesTransport",
    "MessagesApiError",
    "MessagesTransport",
    "OpenAICompatibleLlm",
    "OpenAIConfig",
    "OpenAILlm",
    "OpenRouterConfig",
    "OpenRouterLlm",
    "ProviderConfig",
    "ProviderError",
    "ProviderNotFoundError",
    "ProviderRegistry",
    "XAILlm",
    "create_error_response",
    "default_registry",
]
