"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from llmbridge.cli_commands.convert import convert
    from llmbridge.cli_commands.replay import replay

    cli.add_command(convert)
    cli.add_command(replay)
