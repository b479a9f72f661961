"""Wire-level helpers shared by the dialect converters and the stream accumulator."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from llmbridge.core.errors import UnsupportedRoleError
from llmbridge.core.models import (
    Content,
    FunctionCallPart,
    LlmRequest,
    TextPart,
)

logger = logging.getLogger(__name__)

SUPPORTED_ROLES = frozenset({"user", "model"})


def field_of(obj: Any, name: str, default: Any = None) -> Any:
    """Read *name* from a dict or an SDK object with attribute access."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        value = obj.get(name, default)
    else:
        value = getattr(obj, name, default)
    return default if value is None else value


def dumps_compact(value: Any) -> str:
    """Serialize to JSON the way the host framework does (no whitespace)."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def parse_arguments(raw: Any) -> dict[str, Any]:
    """Best-effort parse of tool-call argument JSON.

    Malformed JSON, or JSON that is not an object, yields ``{}``.
    """
    if isinstance(raw, Mapping):
        return dict(raw)
    try:
        result = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.debug("Discarding malformed tool-call arguments: %r", raw)
        return {}
    if not isinstance(result, dict):
        logger.debug("Discarding non-object tool-call arguments: %r", raw)
        return {}
    return result


class CallIdFactory:
    """Issues ``call_<epoch-millis>`` ids for function calls that lack one.

    One factory lives for one request. Ids never repeat within it: a second
    id in the same millisecond gets a ``_<n>`` suffix.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._issued: set[str] = set()

    def __call__(self) -> str:
        base = f"call_{self._clock()}"
        candidate = base
        n = 1
        while candidate in self._issued:
            candidate = f"{base}_{n}"
            n += 1
        self._issued.add(candidate)
        return candidate


def extract_system_instruction(request: LlmRequest) -> str | None:
    """Flatten the request's system instruction to a string.

    Returns ``None`` when absent or empty.
    """
    sys_instruction = request.config.system_instruction
    if not sys_instruction:
        return None
    if isinstance(sys_instruction, str):
        return sys_instruction
    text = join_texts(sys_instruction)
    return text or None


def join_texts(content: Content) -> str:
    return "\n".join(p.text for p in content.parts if isinstance(p, TextPart) and p.text)


@dataclass
class PendingCall:
    id: str
    name: str
    args: dict[str, Any]


@dataclass
class PendingResult:
    id: str
    name: str
    payload: str


@dataclass
class TurnParts:
    """The parts of one turn, grouped by kind in their original order."""

    role: str
    texts: list[str] = field(default_factory=list)
    calls: list[PendingCall] = field(default_factory=list)
    results: list[PendingResult] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.texts)


def collect_turn(content: Content, call_ids: CallIdFactory) -> TurnParts:
    turn = TurnParts(role=content.role or "")
    for part in content.parts:
        if isinstance(part, TextPart):
            if part.text:
                turn.texts.append(part.text)
        elif isinstance(part, FunctionCallPart):
            fc = part.function_call
            turn.calls.append(PendingCall(id=fc.id or call_ids(), name=fc.name, args=fc.args))
        else:
            fr = part.function_response
            turn.results.append(
                PendingResult(id=fr.id or "", name=fr.name, payload=dumps_compact(fr.response))
            )
    return turn


def iter_turns(
    request: LlmRequest, *, strict_roles: bool, call_ids: CallIdFactory
) -> list[TurnParts]:
    """Group every non-empty turn, applying the unknown-role policy.

    Unknown roles are dropped, or raise :class:`UnsupportedRoleError` when
    *strict_roles* is set.
    """
    turns: list[TurnParts] = []
    for content in request.contents:
        if not content.parts:
            continue
        if content.role not in SUPPORTED_ROLES:
            if strict_roles:
                raise UnsupportedRoleError(content.role)
            logger.debug("Dropping turn with unsupported role %r", content.role)
            continue
        turns.append(collect_turn(content, call_ids))
    return turns


def iter_function_declarations(request: LlmRequest) -> list[Any]:
    declarations: list[Any] = []
    for group in request.config.tools or []:
        declarations.extend(group.function_declarations or [])
    return declarations


def ensure_request(request: LlmRequest | Mapping[str, Any]) -> LlmRequest:
    """Accept either a parsed request or its raw wire dict."""
    if isinstance(request, LlmRequest):
        return request
    return LlmRequest.model_validate(request)
