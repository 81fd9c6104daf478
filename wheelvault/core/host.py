"""Host preflight — architecture, OS release and tool checks.

Prebuilt Jetson wheels target aarch64 Ubuntu; anything else is worth a
warning but never stops the run.
"""

from __future__ import annotations

import logging
import platform
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from wheelvault.core.version_resolver import cuda_resolver, l4t_resolver
from wheelvault.models.config import ResolverConfig
from wheelvault.models.reports import HostReport

if TYPE_CHECKING:
    from wheelvault.config import VaultSettings

logger = logging.getLogger(__name__)


def read_os_codename(os_release: Path) -> str | None:
    """Return ``VERSION_CODENAME`` from an os-release file, if present."""
    if not os_release.is_file():
        return None
    for line in os_release.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() == "VERSION_CODENAME":
            return value.strip().strip('"').strip("'") or None
    return None


def inspect_host(settings: VaultSettings, *, architecture: str | None = None) -> HostReport:
    """Collect host facts and preflight warnings."""
    arch = architecture or platform.machine()
    codename = read_os_codename(settings.os_release)
    resolver_config = ResolverConfig.from_settings(settings)

    warnings: list[str] = []
    if arch != settings.expected_arch:
        warnings.append(
            f"Non-{settings.expected_arch} host detected ({arch}). "
            "Prebuilt wheels may not match."
        )
    if codename != settings.expected_os_codename:
        warnings.append(
            f"Expected OS codename {settings.expected_os_codename}; "
            f"detected {codename or 'unknown'}."
        )

    missing = [cmd for cmd in settings.required_commands if shutil.which(cmd) is None]
    for cmd in missing:
        warnings.append(f"Missing required command: '{cmd}'")

    for message in warnings:
        logger.warning(message)

    return HostReport(
        architecture=arch,
        os_codename=codename,
        cuda_version=cuda_resolver(resolver_config).resolve_raw(),
        l4t_version=l4t_resolver(resolver_config).resolve_raw(),
        missing_commands=missing,
        warnings=warnings,
    )
