"""Anthropic Messages ("message blocks") dialect.

Key differences from the chat-completions dialect:
- The system instruction is a top-level ``system`` field, not a message.
- Tool calls are ``tool_use`` content blocks on the assistant message.
- Tool results are ``tool_result`` blocks inside a user message.
- Messages must alternate between user and assistant, so consecutive
  same-role messages are merged.
- Streaming is driven by explicit block lifecycle events
  (``content_block_start`` / ``content_block_delta`` / ``message_stop``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from llmbridge.core.models import (
    FunctionCall,
    FunctionCallPart,
    LlmRequest,
    LlmResponse,
    Part,
    TextPart,
    UsageMetadata,
    model_content,
)
from llmbridge.core.schema import default_parameters, normalize_schema
from llmbridge.core.stream import (
    BlockStart,
    Finish,
    StreamAccumulator,
    StreamChunkResult,
    StreamSignal,
    TextDelta,
    ToolArgumentsDelta,
)
from llmbridge.core.wire import (
    CallIdFactory,
    TurnParts,
    ensure_request,
    extract_system_instruction,
    field_of,
    iter_function_declarations,
    iter_turns,
    parse_arguments,
)

DEFAULT_MAX_TOKENS = 4096


@dataclass
class ConvertedAnthropicRequest:
    messages: list[dict[str, Any]]
    system: str | None = None
    tools: list[dict[str, Any]] | None = None


# ---------------------------------------------------------------------------
# Request conversion
# ---------------------------------------------------------------------------


def convert_anthropic_request(
    request: LlmRequest | Mapping[str, Any],
    *,
    strict_roles: bool = False,
    call_ids: CallIdFactory | None = None,
) -> ConvertedAnthropicRequest:
    """Convert a framework request to Messages API messages, system, and tools."""
    req = ensure_request(request)
    ids = call_ids or CallIdFactory()

    raw_messages: list[dict[str, Any]] = []
    for turn in iter_turns(req, strict_roles=strict_roles, call_ids=ids):
        msg = _turn_to_message(turn)
        if msg is not None:
            raw_messages.append(msg)

    return ConvertedAnthropicRequest(
        messages=_merge_consecutive_roles(raw_messages),
        system=extract_system_instruction(req),
        tools=convert_anthropic_tools(req),
    )


def _turn_to_message(turn: TurnParts) -> dict[str, Any] | None:
    if turn.role == "user":
        # tool_result blocks must lead the user message
        blocks: list[dict[str, Any]] = [
            {"type": "tool_result", "tool_use_id": result.id, "content": result.payload}
            for result in turn.results
        ]
        if not blocks:
            return {"role": "user", "content": turn.text} if turn.texts else None
        if turn.texts:
            blocks.append({"type": "text", "text": turn.text})
        return {"role": "user", "content": blocks}

    if not (turn.texts or turn.calls):
        return None
    content: list[dict[str, Any]] = []
    if turn.texts:
        content.append({"type": "text", "text": turn.text})
    for call in turn.calls:
        content.append({"type": "tool_use", "id": call.id, "name": call.name, "input": call.args})
    return {"role": "assistant", "content": content}


def _merge_consecutive_roles(messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
    merged: list[dict[str, Any]] = []
    for msg in messages:
        if merged and merged[-1]["role"] == msg["role"]:
            merged[-1]["content"] = _merge_content(merged[-1]["content"], msg["content"])
        else:
            merged.append(msg)
    return merged


def _merge_content(
    existing: str | list[dict[str, Any]], new: str | list[dict[str, Any]]
) -> list[dict[str, Any]]:
    result: list[dict[str, Any]] = []
    for item in (existing, new):
        if isinstance(item, str):
            result.append({"type": "text", "text": item})
        else:
            result.extend(item)
    return result


def convert_anthropic_tools(
    request: LlmRequest | Mapping[str, Any],
) -> list[dict[str, Any]] | None:
    tools = [
        {
            "name": decl.name,
            "description": decl.description or "",
            "input_schema": normalize_schema(decl.parameters) or default_parameters(),
        }
        for decl in iter_function_declarations(ensure_request(request))
    ]
    return tools or None


def build_messages_request(
    model: str,
    converted: ConvertedAnthropicRequest,
    *,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    stream: bool = False,
    extra: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Assemble the Messages API request body."""
    body: dict[str, Any] = {
        "model": model,
        "max_tokens": max_tokens,
        "messages": converted.messages,
    }
    if converted.system:
        body["system"] = converted.system
    if converted.tools:
        body["tools"] = converted.tools
    if stream:
        body["stream"] = True
    if extra:
        body.update(extra)
    return body


# ---------------------------------------------------------------------------
# Single-shot responses
# ---------------------------------------------------------------------------


def convert_anthropic_response(message: Any) -> LlmResponse:
    """Convert a complete Messages API response to a framework response."""
    parts: list[Part] = []
    for block in field_of(message, "content", []):
        block_type = field_of(block, "type")
        if block_type == "text":
            parts.append(TextPart(text=field_of(block, "text", "")))
        elif block_type == "tool_use":
            parts.append(
                FunctionCallPart(
                    function_call=FunctionCall(
                        id=field_of(block, "id"),
                        name=field_of(block, "name", ""),
                        args=parse_arguments(field_of(block, "input", {})),
                    )
                )
            )

    return LlmResponse(
        content=model_content(parts),
        turn_complete=True,
        usage_metadata=convert_anthropic_usage(field_of(message, "usage")),
    )


def convert_anthropic_usage(usage: Any) -> UsageMetadata | None:
    if not usage:
        return None
    input_tokens = field_of(usage, "input_tokens", 0)
    output_tokens = field_of(usage, "output_tokens", 0)
    return UsageMetadata(
        prompt_token_count=input_tokens,
        candidates_token_count=output_tokens,
        total_token_count=input_tokens + output_tokens,
    )


# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------


def classify_event(event: Any) -> list[StreamSignal]:
    """Translate one Messages API stream event into stream signals.

    Events other than block start/delta and ``message_stop`` (pings,
    ``message_start``, ``message_delta``, ``content_block_stop``) carry
    nothing the accumulator needs.
    """
    event_type = field_of(event, "type")
    index = field_of(event, "index", 0)

    if event_type == "content_block_start":
        block = field_of(event, "content_block")
        if field_of(block, "type") == "tool_use":
            return [
                BlockStart(
                    index,
                    tool_id=field_of(block, "id", ""),
                    tool_name=field_of(block, "name", ""),
                )
            ]
        return [BlockStart(index)]

    if event_type == "content_block_delta":
        delta = field_of(event, "delta")
        delta_type = field_of(delta, "type")
        if delta_type == "text_delta":
            return [TextDelta(field_of(delta, "text", ""))]
        if delta_type == "input_json_delta":
            return [ToolArgumentsDelta(index, field_of(delta, "partial_json", ""))]
        return []

    if event_type == "message_stop":
        return [Finish()]

    return []


def create_anthropic_stream_accumulator() -> StreamAccumulator:
    return StreamAccumulator()


def convert_anthropic_stream_event(event: Any, acc: StreamAccumulator) -> StreamChunkResult:
    """Fold one Messages API stream event into *acc*."""
    return acc.apply(classify_event(event))


class AnthropicConverter:
    """Messages dialect bundled for dialect-agnostic callers."""

    dialect = "anthropic"

    def __init__(self, max_tokens: int = DEFAULT_MAX_TOKENS) -> None:
        self.max_tokens = max_tokens

    def convert_request(
        self, request: LlmRequest | Mapping[str, Any], model: str, *, stream: bool = False
    ) -> dict[str, Any]:
        return build_messages_request(
            model, convert_anthropic_request(request), max_tokens=self.max_tokens, stream=stream
        )

    def convert_response(self, response: Any) -> LlmResponse:
        return convert_anthropic_response(response)

    def new_accumulator(self) -> StreamAccumulator:
        return create_anthropic_stream_accumulator()

    def convert_stream_item(self, item: Any, acc: StreamAccumulator) -> StreamChunkResult:
        return convert_anthropic_stream_event(item, acc)
