"""Converter protocol — translates between framework and vendor formats.

Each wire dialect (chat completions, Anthropic Messages) has a concrete
converter that builds vendor request bodies from a framework request and
turns vendor responses or stream items back into framework responses.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from llmbridge.core.converters.anthropic import AnthropicConverter
from llmbridge.core.converters.openai import OpenAIConverter
from llmbridge.core.models import LlmRequest, LlmResponse
from llmbridge.core.stream import StreamAccumulator, StreamChunkResult


class DialectConverter(Protocol):
    """Protocol for a vendor wire dialect."""

    dialect: str

    def convert_request(
        self, request: LlmRequest | Mapping[str, Any], model: str, *, stream: bool = False
    ) -> dict[str, Any]:
        """Build the vendor request body for *model*."""
        ...

    def convert_response(self, response: Any) -> LlmResponse:
        """Convert one complete vendor response."""
        ...

    def new_accumulator(self) -> StreamAccumulator:
        """Return a fresh accumulator for one stream."""
        ...

    def convert_stream_item(self, item: Any, acc: StreamAccumulator) -> StreamChunkResult:
        """Fold one vendor stream chunk/event into *acc*."""
        ...


DIALECTS = ("openai", "anthropic")


def get_converter(dialect: str) -> DialectConverter:
    """Return the converter for *dialect*; unknown names get chat completions."""
    mapping: dict[str, DialectConverter] = {
        "openai": OpenAIConverter(),
        "anthropic": AnthropicConverter(),
    }
    return mapping.get(dialect, OpenAIConverter())
