"""Dialect-specific request/response converters."""

from llmbridge.core.converters.anthropic import AnthropicConverter
from llmbridge.core.converters.openai import OpenAIConverter

__all__ = ["AnthropicConverter", "OpenAIConverter"]
