"""``wheelvault detect`` — report host platform and the wheel version key.

Runs the host preflight (architecture, OS codename, required tools) and
the CUDA / L4T probes. Exits non-zero when no CUDA version is found,
since wheel compatibility cannot be determined without it.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from wheelvault.config import config as settings
from wheelvault.core.host import inspect_host
from wheelvault.core.version_resolver import normalize_version

console = Console()


def detect_cmd() -> None:
    """Detect L4T / CUDA versions and run host preflight checks."""
    report = inspect_host(settings)

    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("Check", min_width=16)
    table.add_column("Value")

    table.add_row("Architecture", report.architecture)
    table.add_row("OS codename", report.os_codename or "[yellow]unknown[/yellow]")
    table.add_row("L4T / JetPack", report.l4t_version or "[yellow]unknown[/yellow]")
    table.add_row("CUDA", report.cuda_version or "[red]not found[/red]")
    if report.cuda_version:
        table.add_row("Version key", f"[bold]{normalize_version(report.cuda_version)}[/bold]")
    if report.missing_commands:
        table.add_row("Missing tools", ", ".join(report.missing_commands))

    if report.warnings:
        subtitle = f"[yellow]{len(report.warnings)} warning(s)[/yellow]"
        border_style = "yellow"
    else:
        subtitle = "[green]Host looks compatible.[/green]"
        border_style = "green"

    console.print()
    console.print(
        Panel(
            table,
            title="[bold]Host Detection[/bold]",
            subtitle=subtitle,
            border_style=border_style,
            padding=(1, 2),
        )
    )
    for warning in report.warnings:
        console.print(f"[yellow]![/yellow] {warning}")
    console.print()

    if not report.cuda_version:
        console.print(
            "[bold red]CUDA not found![/bold red] "
            "Install JetPack / CUDA at system level first."
        )
        raise typer.Exit(code=1)
