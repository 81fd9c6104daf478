"""``wheelvault known`` — list the known wheels for a version key."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from wheelvault.cli.commands.fetch import normalize_key_option
from wheelvault.config import config as settings
from wheelvault.core.known_artifacts import KnownArtifactLookup
from wheelvault.core.version_resolver import VersionNotFoundError, cuda_resolver
from wheelvault.known_file import KnownFileError, load_known_artifacts
from wheelvault.models.config import ResolverConfig

console = Console()


def known_cmd(
    key: str = typer.Option(
        None,
        "--key",
        "-k",
        help="Version key (e.g. 12.6). Detected from the host when omitted.",
    ),
    known_file: Path = typer.Option(
        None,
        "--known-file",
        "-f",
        help="Known-wheel mapping file (.toml, .json or legacy .sh).",
    ),
) -> None:
    """Show the predefined wheels and checksums for a version key."""
    try:
        mapping = load_known_artifacts(known_file or settings.known_file)
    except KnownFileError as exc:
        console.print(f"[bold red]Invalid known-wheel file:[/bold red] {exc}")
        raise typer.Exit(code=1)

    key = normalize_key_option(key)
    if key is None:
        try:
            key = cuda_resolver(ResolverConfig.from_settings(settings)).resolve()
        except VersionNotFoundError as exc:
            console.print(f"[bold red]{exc}[/bold red] Pass --key to choose one.")
            raise typer.Exit(code=1)

    lookup = KnownArtifactLookup(mapping)
    refs = lookup.lookup(key)

    if lookup.keys():
        console.print(f"[dim]Configured keys: {', '.join(lookup.keys())}[/dim]")

    if not refs:
        console.print(f"[dim]No usable wheels configured for {key}.[/dim]")
    else:
        table = Table(title=f"Known wheels for {key}")
        table.add_column("#", justify="right")
        table.add_column("File", style="cyan")
        table.add_column("SHA-256", style="green")
        for i, ref in enumerate(refs, 1):
            table.add_row(str(i), ref.file_name, ref.expected_digest or "")
        console.print(table)

    for issue in lookup.issues:
        console.print(f"[yellow]![/yellow] {issue.message}")
