"""Conversion core: framework model, schema normalization, dialect converters."""

from llmbridge.core.converter import DialectConverter, get_converter
from llmbridge.core.converters.anthropic import (
    convert_anthropic_request,
    convert_anthropic_response,
    convert_anthropic_stream_event,
    create_anthropic_stream_accumulator,
)
from llmbridge.core.converters.openai import (
    convert_request,
    convert_response,
    convert_stream_chunk,
    create_stream_accumulator,
)
from llmbridge.core.errors import BridgeError, ConversionError, UnsupportedRoleError
from llmbridge.core.models import (
    Content,
    FunctionCall,
    FunctionCallPart,
    FunctionDeclaration,
    FunctionResponse,
    FunctionResponsePart,
    LlmRequest,
    LlmResponse,
    Part,
    TextPart,
    ToolGroup,
    UsageMetadata,
)
from llmbridge.core.schema import normalize_schema
from llmbridge.core.stream import StreamAccumulator, StreamChunkResult

__all__ = [
    "BridgeError",
    "Content",
    "ConversionError",
    "DialectConverter",
    "FunctionCall",
    "FunctionCallPart",
    "FunctionDeclaration",
    "FunctionResponse",
    "FunctionResponsePart",
    "LlmRequest",
    "LlmResponse",
    "Part",
    "StreamAccumulator",
    "StreamChunkResult",
    "TextPart",
    "ToolGroup",
    "UnsupportedRoleError",
    "UsageMetadata",
    "convert_anthropic_request",
    "convert_anthropic_response",
    "convert_anthropic_stream_event",
    "convert_request",
    "convert_response",
    "convert_stream_chunk",
    "create_anthropic_stream_accumulator",
    "create_stream_accumulator",
    "get_converter",
    "normalize_schema",
]
