"""llmbridge CLI entrypoint."""

from __future__ import annotations

import click

from llmbridge import __version__


@click.group()
@click.version_option(version=__version__, prog_name="llmbridge")
def main() -> None:
    """llmbridge — inspect request and stream conversions."""


# Register subcommands
from llmbridge.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
