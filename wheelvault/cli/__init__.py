"""wheelvault CLI — Typer-based command-line interface.

Provides the ``wheelvault`` command with subcommands for host detection,
listing known wheels, fetching and verifying them, and installing the
isolated environment.

All output uses Rich for formatted terminal display.
"""
