"""``wheelvault install`` — build the isolated environment end to end.

Steps:
    1. Acquire wheels (same as ``wheelvault fetch``).
    2. Ensure the Python interpreter and the isolated venv via uv.
    3. Install ready wheels with ``--no-deps``, verified ones first.
    4. Install the requirements file and the fixed package list.
    5. Verify the interpreter and torch CUDA access.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from wheelvault.cli.commands.fetch import render_result, run_acquisition
from wheelvault.config import config as settings
from wheelvault.core.installer import InstallError, WheelInstaller

console = Console()

PACKAGE_LIST_LIMIT = 80


def summarize_packages(listing: str, limit: int = PACKAGE_LIST_LIMIT) -> str:
    """First *limit* lines of a ``uv pip list`` listing, noting any remainder."""
    lines = listing.strip().splitlines()
    shown = "\n".join(lines[:limit])
    if len(lines) > limit:
        shown += f"\n... ({len(lines) - limit} more)"
    return shown


def install_cmd(
    wheels_dir: Path = typer.Option(
        None, "--wheels-dir", "-w", help="Wheel cache directory."
    ),
    known_file: Path = typer.Option(
        None, "--known-file", "-f", help="Known-wheel mapping file."
    ),
    key: str = typer.Option(
        None, "--key", "-k", help="Version key to use instead of detecting CUDA."
    ),
    venv_dir: Path = typer.Option(
        None, "--venv", help="Virtual environment directory (default: WHEELVAULT_VENV_DIR)."
    ),
    skip_packages: bool = typer.Option(
        False,
        "--skip-packages",
        help="Only install the cached wheels, not the package list.",
    ),
) -> None:
    """Fetch verified wheels and install them into an isolated venv."""
    result = run_acquisition(
        settings, wheels_dir=wheels_dir, known_file=known_file, key=key
    )
    render_result(result)

    installer = WheelInstaller(venv_dir or settings.venv_dir)
    try:
        installer.ensure_python(settings.python_version)
        installer.ensure_venv(settings.python_version)
        installer.install_wheels(result.ready_paths)
        if not skip_packages:
            installer.install_packages(
                settings.install_packages,
                requirements_file=settings.requirements_file,
                extra_index_url=settings.extra_index_url,
            )
        checks = installer.verify()
    except InstallError as exc:
        console.print(f"[bold red]Installation failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print()
    console.print(
        Panel(
            "\n".join([
                "[bold green]Environment ready.[/bold green]",
                "",
                f"[bold]Venv:[/bold]     {installer.venv_dir}",
                f"[bold]Python:[/bold]   {checks['python']}",
                f"[bold]Wheels:[/bold]   {len(result.verified)} verified, "
                f"{len(result.unverified)} local",
                "",
                checks["torch"],
                "",
                "[bold]Installed packages:[/bold]",
                escape(summarize_packages(checks["packages"])),
                "",
                f"[dim]Activate with: source '{installer.venv_dir}/bin/activate'[/dim]",
            ]),
            title="[bold]wheelvault[/bold]",
            border_style="green" if not result.fallback_required else "yellow",
            padding=(1, 2),
        )
    )
    console.print()
