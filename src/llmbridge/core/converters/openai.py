"""OpenAI-compatible chat-completions dialect.

Request side: a framework turn history becomes a ChatML message list.
- The system instruction is the first ``system`` message.
- A ``user`` turn's text is one ``user`` message; each of its function
  responses follows as its own ``tool`` message.
- A ``model`` turn's text and function calls merge into one ``assistant``
  message. ``content`` is an explicit ``None`` when only tool calls exist.
- Tool declarations become ``function`` tools with normalized schemas.

Response side: a complete ``ChatCompletion`` maps to one framework response;
streamed ``ChatCompletionChunk`` objects are classified into stream signals
and folded by a :class:`~llmbridge.core.stream.StreamAccumulator`.

Vendor objects may be plain dicts or SDK objects (litellm/openai) with
attribute access.
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
    Finish,
    StreamAccumulator,
    StreamChunkResult,
    StreamSignal,
    TextDelta,
    ToolCallDelta,
)
from llmbridge.core.wire import (
    CallIdFactory,
    TurnParts,
    dumps_compact,
    ensure_request,
    extract_system_instruction,
    field_of,
    iter_function_declarations,
    iter_turns,
    parse_arguments,
)

NO_CHOICE_CODE = "NO_CHOICE"
NO_CHOICE_MESSAGE = "No response choice"


@dataclass
class ConvertedRequest:
    messages: list[dict[str, Any]]
    tools: list[dict[str, Any]] | None = None


# ---------------------------------------------------------------------------
# Request conversion
# ---------------------------------------------------------------------------


def convert_request(
    request: LlmRequest | Mapping[str, Any],
    *,
    strict_roles: bool = False,
    call_ids: CallIdFactory | None = None,
) -> ConvertedRequest:
    """Convert a framework request to chat-completion messages and tools.

    Turns with a role other than ``user``/``model`` are dropped unless
    *strict_roles* is set, in which case they raise
    :class:`~llmbridge.core.errors.UnsupportedRoleError`.
    """
    req = ensure_request(request)
    ids = call_ids or CallIdFactory()
    messages: list[dict[str, Any]] = []

    system = extract_system_instruction(req)
    if system:
        messages.append({"role": "system", "content": system})

    for turn in iter_turns(req, strict_roles=strict_roles, call_ids=ids):
        messages.extend(_turn_to_messages(turn))

    return ConvertedRequest(messages=messages, tools=convert_tools(req))


def _turn_to_messages(turn: TurnParts) -> list[dict[str, Any]]:
    messages: list[dict[str, Any]] = []

    if turn.role == "user":
        if turn.texts:
            messages.append({"role": "user", "content": turn.text})
        for result in turn.results:
            messages.append({"role": "tool", "tool_call_id": result.id, "content": result.payload})
        return messages

    if turn.texts or turn.calls:
        msg: dict[str, Any] = {
            "role": "assistant",
            "content": turn.text if turn.texts else None,
        }
        if turn.calls:
            msg["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": dumps_compact(call.args)},
                }
                for call in turn.calls
            ]
        messages.append(msg)
    return messages


def convert_tools(request: LlmRequest | Mapping[str, Any]) -> list[dict[str, Any]] | None:
    """Convert function declarations to ``function`` tools.

    Returns ``None`` rather than ``[]`` when nothing is declared, so the
    ``tools`` field can be omitted from the wire request.
    """
    tools = [
        {
            "type": "function",
            "function": {
                "name": decl.name,
                "description": decl.description or "",
                "parameters": normalize_schema(decl.parameters) or default_parameters(),
            },
        }
        for decl in iter_function_declarations(ensure_request(request))
    ]
    return tools or None


def build_chat_request(
    model: str,
    converted: ConvertedRequest,
    *,
    stream: bool = False,
    extra: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Assemble the chat-completion request body.

    *extra* holds provider-specific fields and is merged in verbatim.
    """
    body: dict[str, Any] = {"model": model, "messages": converted.messages}
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


def convert_response(response: Any) -> LlmResponse:
    """Convert a complete chat completion to a framework response.

    Only the first choice is honoured. An empty choice list yields a
    ``NO_CHOICE`` error response rather than raising.
    """
    choices = field_of(response, "choices", [])
    if not choices:
        return LlmResponse(
            error_code=NO_CHOICE_CODE,
            error_message=NO_CHOICE_MESSAGE,
            turn_complete=True,
        )

    message = field_of(choices[0], "message")
    parts: list[Part] = []

    text = field_of(message, "content")
    if isinstance(text, str) and text:
        parts.append(TextPart(text=text))

    for tc in field_of(message, "tool_calls", []):
        fn = field_of(tc, "function")
        parts.append(
            FunctionCallPart(
                function_call=FunctionCall(
                    id=field_of(tc, "id"),
                    name=field_of(fn, "name", ""),
                    args=parse_arguments(field_of(fn, "arguments")),
                )
            )
        )

    return LlmResponse(
        content=model_content(parts),
        turn_complete=True,
        usage_metadata=convert_usage(field_of(response, "usage")),
    )


def convert_usage(usage: Any) -> UsageMetadata | None:
    if not usage:
        return None
    return UsageMetadata(
        prompt_token_count=field_of(usage, "prompt_tokens"),
        candidates_token_count=field_of(usage, "completion_tokens"),
        total_token_count=field_of(usage, "total_tokens"),
    )


# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------


def classify_chunk(chunk: Any) -> list[StreamSignal]:
    """Translate one ``ChatCompletionChunk`` into stream signals.

    A chunk carrying a text delta yields only that delta: any tool-call
    fragments or finish reason on the same chunk are not processed.
    """
    choices = field_of(chunk, "choices", [])
    if not choices:
        return []
    choice = choices[0]
    delta = field_of(choice, "delta")

    content = field_of(delta, "content")
    if isinstance(content, str) and content:
        return [TextDelta(content)]

    signals: list[StreamSignal] = []
    for tc in field_of(delta, "tool_calls", []):
        fn = field_of(tc, "function")
        signals.append(
            ToolCallDelta(
                index=field_of(tc, "index", 0),
                id=field_of(tc, "id"),
                name=field_of(fn, "name"),
                arguments=field_of(fn, "arguments"),
            )
        )

    finish_reason = field_of(choice, "finish_reason")
    if finish_reason:
        signals.append(Finish(str(finish_reason)))
    return signals


def create_stream_accumulator() -> StreamAccumulator:
    return StreamAccumulator()


def convert_stream_chunk(chunk: Any, acc: StreamAccumulator) -> StreamChunkResult:
    """Fold one streamed chunk into *acc*.

    Returns a partial response for each text delta, the final assembled
    response (with ``is_complete=True``) on the finish chunk, and no
    response otherwise.
    """
    return acc.apply(classify_chunk(chunk))


class OpenAIConverter:
    """Chat-completions dialect bundled for dialect-agnostic callers."""

    dialect = "openai"

    def convert_request(
        self, request: LlmRequest | Mapping[str, Any], model: str, *, stream: bool = False
    ) -> dict[str, Any]:
        return build_chat_request(model, convert_request(request), stream=stream)

    def convert_response(self, response: Any) -> LlmResponse:
        return convert_response(response)

    def new_accumulator(self) -> StreamAccumulator:
        return create_stream_accumulator()

    def convert_stream_item(self, item: Any, acc: StreamAccumulator) -> StreamChunkResult:
        return convert_stream_chunk(item, acc)
