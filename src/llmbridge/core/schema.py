"""Tool-parameter schema normalization.

The host framework declares tool parameters with upper-case primitive type
names (``OBJECT``, ``STRING``); chat-completion APIs expect JSON Schema's
lower-case names. Normalization rewrites every ``type`` string and leaves
everything else (descriptions, enums, ``required`` lists) untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def default_parameters() -> dict[str, Any]:
    """Return the schema used when a declaration has no parameters."""
    return {"type": "object", "properties": {}}


def normalize_schema(schema: Any) -> dict[str, Any] | None:
    """Return a copy of *schema* with every ``type`` value lower-cased.

    Nested mappings (``properties``, ``items``, ...) are normalized
    recursively. Lists and scalars pass through unchanged. Anything that is
    not a mapping yields ``None`` ("no schema"); the caller substitutes
    :func:`default_parameters`.
    """
    if not isinstance(schema, Mapping):
        return None

    result: dict[str, Any] = {}
    for key, value in schema.items():
        if key == "type" and isinstance(value, str):
            result[key] = value.lower()
        elif isinstance(value, Mapping):
            result[key] = normalize_schema(value)
        else:
            result[key] = value
    return result
