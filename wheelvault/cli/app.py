"""Main Typer application — imports and registers all CLI commands.

Entry point: ``wheelvault`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from wheelvault.cli.commands.detect import detect_cmd
from wheelvault.cli.commands.fetch import fetch_cmd
from wheelvault.cli.commands.install import install_cmd
from wheelvault.cli.commands.known import known_cmd
from wheelvault.config import config

app = typer.Typer(
    name="wheelvault",
    help="wheelvault: verified wheel cache and isolated venv installer for Jetson boards.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Set up Rich logging at the configured level."""
    level = logging.DEBUG if verbose else config.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="detect", help="Detect L4T / CUDA versions and check the host.")(detect_cmd)
app.command(name="known", help="List known wheels for a version key.")(known_cmd)
app.command(name="fetch", help="Download and verify version-matched wheels.")(fetch_cmd)
app.command(name="install", help="Fetch wheels and install them into an isolated venv.")(install_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
