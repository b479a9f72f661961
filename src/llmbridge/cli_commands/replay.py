"""``llmbridge replay`` — fold a recorded stream through an accumulator."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from llmbridge.cli_commands._output import console, print_response
from llmbridge.core.converter import DIALECTS, get_converter
from llmbridge.core.models import LlmResponse


@click.command("replay")
@click.argument("stream_file", type=click.Path(exists=True))
@click.option(
    "--dialect",
    type=click.Choice(list(DIALECTS)),
    default="openai",
    show_default=True,
    help="Dialect the recorded chunks/events are in.",
)
@click.option("--quiet", "-q", is_flag=True, help="Do not echo partial text fragments.")
@click.option("--json", "as_json", is_flag=True, help="Print the final response as JSON.")
def replay(stream_file: str, dialect: str, quiet: bool, as_json: bool) -> None:
    """Replay a recorded stream and print the reassembled response.

    STREAM_FILE is a JSONL file with one chunk (openai) or event (anthropic)
    per line, in arrival order.
    """
    converter = get_converter(dialect)
    acc = converter.new_accumulator()
    final: LlmResponse | None = None

    lines = Path(stream_file).read_text().splitlines()
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            item = json.loads(line)
        except json.JSONDecodeError as exc:
            console.print(f"[red]Line {lineno} is not valid JSON:[/red] {exc}")
            sys.exit(1)

        result = converter.convert_stream_item(item, acc)
        if result.response is not None and result.response.partial and not quiet and not as_json:
            console.print(f"[dim]partial[/dim] {result.response.text!r}")
        if result.is_complete:
            final = result.response
            break

    if final is None:
        console.print("[yellow]Stream ended without a terminal chunk[/yellow]")
        sys.exit(1)

    print_response(final, as_json=as_json)
