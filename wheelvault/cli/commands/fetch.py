"""``wheelvault fetch`` — download and verify the known wheels.

Resolves the version key, fetches every known wheel into the cache
directory (reusing intact copies), and lists the install-ready paths.
An empty result is not an error: the installer falls back to the index.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from wheelvault.config import VaultSettings
from wheelvault.config import config as settings
from wheelvault.core.fetcher import RequestsFetcher
from wheelvault.core.pipeline import AcquisitionPipeline
from wheelvault.core.version_resolver import VersionNotFoundError, normalize_version
from wheelvault.known_file import KnownFileError, load_known_artifacts
from wheelvault.models.config import ResolverConfig
from wheelvault.models.reports import AcquisitionResult

console = Console()


def normalize_key_option(key: str | None) -> str | None:
    """Reduce a user-supplied ``--key`` to major.minor, like a detected key."""
    if key is None:
        return None
    try:
        return normalize_version(key)
    except ValueError as exc:
        console.print(f"[bold red]Invalid --key:[/bold red] {exc}")
        raise typer.Exit(code=1)


def run_acquisition(
    vault_settings: VaultSettings,
    *,
    wheels_dir: Path | None = None,
    known_file: Path | None = None,
    key: str | None = None,
) -> AcquisitionResult:
    """Build the pipeline from settings plus CLI overrides and run it.

    Exits the CLI with code 1 on the fatal conditions (malformed known
    file, no detectable version).
    """
    key = normalize_key_option(key)
    try:
        mapping = load_known_artifacts(known_file or vault_settings.known_file)
    except KnownFileError as exc:
        console.print(f"[bold red]Invalid known-wheel file:[/bold red] {exc}")
        raise typer.Exit(code=1)

    pipeline = AcquisitionPipeline.from_mapping(
        ResolverConfig.from_settings(vault_settings, cache_dir=wheels_dir),
        mapping,
        fetcher=RequestsFetcher(timeout=vault_settings.fetch_timeout_seconds),
    )
    try:
        return pipeline.run(version_key=key)
    except VersionNotFoundError as exc:
        console.print(
            f"[bold red]{exc}.[/bold red] "
            "Install JetPack / CUDA at system level first, or pass --key."
        )
        raise typer.Exit(code=1)


def render_result(result: AcquisitionResult) -> None:
    table = Table(title=f"Wheels ready for {result.version_key}")
    table.add_column("#", justify="right")
    table.add_column("Wheel", style="cyan")
    table.add_column("Verified", justify="center")

    for i, artifact in enumerate(result.verified + result.unverified, 1):
        verified = "[green]Yes[/green]" if artifact.verified else "[yellow]Local[/yellow]"
        table.add_row(str(i), artifact.path.name, verified)

    console.print()
    if result.ready_paths:
        console.print(table)
    else:
        console.print(
            "[bold yellow]No valid local wheels found.[/bold yellow] "
            "Installation will fall back to the public index."
        )
    for issue in result.issues:
        console.print(f"[yellow]![/yellow] [dim]{issue.kind.value}[/dim] {issue.message}")
    console.print()


def fetch_cmd(
    wheels_dir: Path = typer.Option(
        None,
        "--wheels-dir",
        "-w",
        help="Wheel cache directory (default: WHEELVAULT_WHEELS_DIR).",
    ),
    known_file: Path = typer.Option(
        None,
        "--known-file",
        "-f",
        help="Known-wheel mapping file (.toml, .json or legacy .sh).",
    ),
    key: str = typer.Option(
        None,
        "--key",
        "-k",
        help="Version key to use instead of detecting CUDA.",
    ),
) -> None:
    """Fetch and verify version-matched wheels into the cache."""
    result = run_acquisition(
        settings, wheels_dir=wheels_dir, known_file=known_file, key=key
    )
    render_result(result)
