"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from llmbridge.core.models import FunctionCallPart, LlmResponse, TextPart

console = Console()


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False))


def print_response(response: LlmResponse, *, as_json: bool = False) -> None:
    """Pretty-print a final framework response."""
    if as_json:
        print_json(response.to_wire())
        return

    if response.error_code:
        console.print(f"[red]{response.error_code}[/red]: {response.error_message}")
        return

    console.print("\n[bold]Final Response[/bold]")
    console.print(f"  Turn complete: {response.turn_complete}")
    parts = response.content.parts if response.content else []
    text = "".join(p.text for p in parts if isinstance(p, TextPart))
    console.print(f"  Text: {_truncate(text) or '(none)'}")

    calls = [p.function_call for p in parts if isinstance(p, FunctionCallPart)]
    if calls:
        table = Table(title="Tool Calls")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Arguments")
        for call in calls:
            table.add_row(call.id or "-", call.name, _truncate(json.dumps(call.args)))
        console.print(table)

    usage = response.usage_metadata
    if usage is not None:
        console.print(
            f"  Tokens: prompt={usage.prompt_token_count} "
            f"completion={usage.candidates_token_count} total={usage.total_token_count}"
        )


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
