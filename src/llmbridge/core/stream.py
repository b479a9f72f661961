"""Streaming accumulation for both vendor dialects.

Vendors stream a response as many small fragments: text deltas, pieces of a
tool call's name or argument JSON (split at arbitrary boundaries), and a
terminal signal. :class:`StreamAccumulator` rebuilds the complete turn from
those fragments. It is dialect-agnostic: each dialect supplies a classifier
that turns one vendor chunk/event into a list of :data:`StreamSignal` values,
and the accumulator applies them.

One accumulator serves one stream. It holds no global state, so concurrent
streams each need their own instance; sharing one across concurrent streams
is a caller error. After a terminal signal the accumulator is empty again and
may be reused for the next turn.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from llmbridge.core.models import (
    FunctionCall,
    FunctionCallPart,
    LlmResponse,
    Part,
    TextPart,
    model_content,
)
from llmbridge.core.wire import parse_arguments

# ---------------------------------------------------------------------------
# Signals: the dialect-neutral vocabulary classifiers produce
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextDelta:
    """A fragment of assistant text."""

    text: str


@dataclass(frozen=True)
class ToolCallDelta:
    """A fragment of a tool call; opens the slot at *index* if needed."""

    index: int
    id: str | None = None
    name: str | None = None
    arguments: str | None = None


@dataclass(frozen=True)
class ToolArgumentsDelta:
    """A fragment of argument JSON for an already-opened slot."""

    index: int
    partial_json: str


@dataclass(frozen=True)
class BlockStart:
    """A content block begins; tool blocks (re)initialize their slot."""

    index: int
    tool_id: str | None = None
    tool_name: str | None = None

    @property
    def is_tool(self) -> bool:
        return self.tool_id is not None or self.tool_name is not None


@dataclass(frozen=True)
class Finish:
    """The turn is over; *reason* is the vendor's stop/finish reason."""

    reason: str | None = None


StreamSignal = TextDelta | ToolCallDelta | ToolArgumentsDelta | BlockStart | Finish


# ---------------------------------------------------------------------------
# Accumulator
# ---------------------------------------------------------------------------


@dataclass
class ToolCallSlot:
    id: str = ""
    name: str = ""
    arguments: str = ""


@dataclass
class StreamChunkResult:
    """Outcome of processing one chunk: an optional response and whether
    the stream's turn is complete."""

    response: LlmResponse | None = None
    is_complete: bool = False


@dataclass
class StreamAccumulator:
    text: str = ""
    tool_calls: dict[int, ToolCallSlot] = field(default_factory=dict)
    current_block_index: int = -1

    def apply(self, signals: list[StreamSignal]) -> StreamChunkResult:
        """Fold *signals* into the running state.

        Text deltas produce a partial response carrying only that fragment.
        A :class:`Finish` produces the final response with the fully
        assembled text and tool calls, and resets the accumulator.
        """
        result = StreamChunkResult()
        for signal in signals:
            if isinstance(signal, TextDelta):
                self.text += signal.text
                result.response = _partial(signal.text)
            elif isinstance(signal, ToolCallDelta):
                slot = self.tool_calls.setdefault(signal.index, ToolCallSlot())
                if signal.id:
                    slot.id = signal.id
                if signal.name:
                    slot.name += signal.name
                if signal.arguments:
                    slot.arguments += signal.arguments
            elif isinstance(signal, ToolArgumentsDelta):
                existing = self.tool_calls.get(signal.index)
                if existing is not None:
                    existing.arguments += signal.partial_json
            elif isinstance(signal, BlockStart):
                self.current_block_index = signal.index
                if signal.is_tool:
                    self.tool_calls[signal.index] = ToolCallSlot(
                        id=signal.tool_id or "", name=signal.tool_name or ""
                    )
            else:
                return StreamChunkResult(response=self.finish(), is_complete=True)
        return result

    def finish(self) -> LlmResponse:
        """Assemble the final response and reset for the next turn."""
        parts: list[Part] = []
        if self.text:
            parts.append(TextPart(text=self.text))
        for slot in self.tool_calls.values():
            if slot.name:
                parts.append(
                    FunctionCallPart(
                        function_call=FunctionCall(
                            id=slot.id, name=slot.name, args=parse_arguments(slot.arguments)
                        )
                    )
                )
        self.reset()
        return LlmResponse(content=model_content(parts), turn_complete=True)

    def reset(self) -> None:
        self.text = ""
        self.tool_calls.clear()
        self.current_block_index = -1


def _partial(text: str) -> LlmResponse:
    return LlmResponse(content=model_content([TextPart(text=text)]), partial=True)
