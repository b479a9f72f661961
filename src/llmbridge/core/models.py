"""Framework-level request/response model.

These types mirror the host agent framework's representation of a
conversation: ordered turns of parts (text, tool invocations, tool results),
tool declarations, and the response envelope that carries content, usage,
and error information. Vendor converters read and produce these types; they
never see the vendor wire formats leak in.

Wire keys are camelCase (``functionCall``, ``turnComplete``); attributes are
snake_case. Both spellings are accepted on input.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Parts: one explicit variant per content unit
# ---------------------------------------------------------------------------


class FunctionCall(_WireModel):
    """A tool invocation requested by the model."""

    id: str | None = None
    name: str = ""
    args: dict[str, Any] = {}

    @field_validator("args", mode="before")
    @classmethod
    def _object_args(cls, value: Any) -> Any:
        return value if isinstance(value, Mapping) else {}


class FunctionResponse(_WireModel):
    """The result of a tool invocation, sent back to the model."""

    id: str | None = None
    name: str = ""
    response: dict[str, Any] = {}

    @field_validator("response", mode="before")
    @classmethod
    def _object_response(cls, value: Any) -> Any:
        return value if isinstance(value, Mapping) else {}


class TextPart(_WireModel):
    text: str


class FunctionCallPart(_WireModel):
    function_call: FunctionCall


class FunctionResponsePart(_WireModel):
    function_response: FunctionResponse


Part = TextPart | FunctionCallPart | FunctionResponsePart

_PART_KEYS: tuple[tuple[tuple[str, str], type[BaseModel]], ...] = (
    (("functionCall", "function_call"), FunctionCallPart),
    (("functionResponse", "function_response"), FunctionResponsePart),
    (("text", "text"), TextPart),
)


def decode_part(raw: Any) -> Part | None:
    """Decode a raw part into its explicit variant.

    Returns ``None`` for parts that carry none of the supported payloads
    (inline data, file references, ...); such parts play no role in
    chat-completion conversion.
    """
    if isinstance(raw, TextPart | FunctionCallPart | FunctionResponsePart):
        return raw
    if not isinstance(raw, Mapping):
        return None
    for keys, part_cls in _PART_KEYS:
        for key in keys:
            if raw.get(key) is not None:
                return part_cls.model_validate({keys[1]: raw[key]})  # type: ignore[return-value]
    logger.debug("Ignoring part with unsupported payload: %s", sorted(raw))
    return None


# ---------------------------------------------------------------------------
# Turns and requests
# ---------------------------------------------------------------------------


class Content(_WireModel):
    """One conversational turn.

    ``role`` is normally ``user`` or ``model``. It is kept as a free, optional
    string so the converters decide what to do with anything else, including
    a missing role.
    """

    role: str | None = None
    parts: list[Part] = []

    @field_validator("role", mode="before")
    @classmethod
    def _string_role(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None

    @field_validator("parts", mode="before")
    @classmethod
    def _decode_parts(cls, value: Any) -> Any:
        if value is None:
            return []
        decoded = (decode_part(item) for item in value)
        return [part for part in decoded if part is not None]

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))


class FunctionDeclaration(_WireModel):
    """A callable tool as declared by the host framework."""

    name: str = ""
    description: str | None = None
    parameters: Any = None


class ToolGroup(_WireModel):
    """A group of tools; only function declarations are relevant here."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    function_declarations: list[FunctionDeclaration] | None = None


class GenerateConfig(_WireModel):
    system_instruction: str | Content | None = None
    tools: list[ToolGroup] | None = None


class LlmRequest(_WireModel):
    """A framework-level generation request."""

    model: str | None = None
    contents: list[Content] = []
    config: GenerateConfig = Field(default_factory=GenerateConfig)

    @field_validator("contents", mode="before")
    @classmethod
    def _none_contents(cls, value: Any) -> Any:
        return [] if value is None else value


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class UsageMetadata(_WireModel):
    prompt_token_count: int | None = None
    candidates_token_count: int | None = None
    total_token_count: int | None = None


class LlmResponse(_WireModel):
    """A framework-level response, partial fragment, or error.

    Error responses carry ``error_code``/``error_message`` and
    ``turn_complete=True`` so callers can treat every response uniformly.
    """

    content: Content | None = None
    turn_complete: bool = False
    partial: bool | None = None
    usage_metadata: UsageMetadata | None = None
    error_code: str | None = None
    error_message: str | None = None

    @property
    def text(self) -> str:
        return self.content.text if self.content is not None else ""

    @property
    def function_calls(self) -> list[FunctionCall]:
        if self.content is None:
            return []
        return [p.function_call for p in self.content.parts if isinstance(p, FunctionCallPart)]

    def to_wire(self) -> dict[str, Any]:
        """Dump with camelCase keys, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


def model_content(parts: list[Part]) -> Content | None:
    """Wrap *parts* as a model turn, or ``None`` when there are no parts."""
    return Content(role="model", parts=parts) if parts else None
