"""``llmbridge convert`` — show the vendor request built from a framework request."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from llmbridge.cli_commands._output import console, print_json
from llmbridge.core.converter import DIALECTS, get_converter
from llmbridge.core.errors import ConversionError
from llmbridge.core.models import LlmRequest


@click.command("convert")
@click.argument("request_file", type=click.Path(exists=True))
@click.option(
    "--dialect",
    type=click.Choice(list(DIALECTS)),
    default="openai",
    show_default=True,
    help="Target wire dialect.",
)
@click.option("--model", default=None, help="Model id (defaults to the request's model).")
@click.option("--stream", is_flag=True, help="Build a streaming request.")
def convert(request_file: str, dialect: str, model: str | None, stream: bool) -> None:
    """Convert a framework request to a vendor request body.

    REQUEST_FILE is a JSON file holding the framework request
    (``contents``, ``config.systemInstruction``, ``config.tools``).
    """
    try:
        request = LlmRequest.model_validate(json.loads(Path(request_file).read_text()))
    except (json.JSONDecodeError, ValidationError) as exc:
        console.print(f"[red]Error loading request:[/red] {exc}")
        sys.exit(1)

    target_model = model or request.model
    if not target_model:
        console.print("[red]No model given:[/red] pass --model or set 'model' in the request")
        sys.exit(1)

    try:
        body = get_converter(dialect).convert_request(request, target_model, stream=stream)
    except ConversionError as exc:
        console.print(f"[red]Conversion failed:[/red] {exc}")
        sys.exit(1)

    print_json(body)
