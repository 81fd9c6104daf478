"""Version resolver — derive a VersionKey from host introspection.

Probes run in order and the first one that yields a parseable version
wins; results are never merged. A resolver with no successful probe
raises ``VersionNotFoundError``, which is fatal for acquisition: without
a version the compatibility of prebuilt wheels cannot be determined.

Built-in probes:

CUDA (drives wheel selection)
    1. ``nvcc --version``                    — ``release 12.6, V12.6.68``
    2. ``<cuda_home>/version.json``          — ``{"cuda": {"version": ...}}``
    3. ``<cuda_home>/version.txt``           — ``CUDA Version 10.2.89``

L4T / JetPack (informational)
    1. ``dpkg -s nvidia-l4t-core``           — ``Version: 36.4.3-2025...``
    2. ``/etc/nv_tegra_release``             — ``# R36 (release), ...``
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from wheelvault.models.config import ResolverConfig

logger = logging.getLogger(__name__)

Probe = Callable[[], str | None]

_VERSION_RE = re.compile(r"\d+(?:\.\d+)*")
_NVCC_RELEASE_RE = re.compile(r"release\s+([^,\s]+)")
_TEGRA_RELEASE_RE = re.compile(r"^#\s*R(\d+)", re.MULTILINE)
_DPKG_VERSION_RE = re.compile(r"^Version:\s*(\S+)", re.MULTILINE)


class VersionNotFoundError(RuntimeError):
    """Raised when no probe yields a parseable version string."""


def parse_version(raw: str | None) -> str | None:
    """Extract the leading dotted-numeric version from a free-form string.

    Returns None when *raw* carries no version.
    """
    if not raw:
        return None
    match = _VERSION_RE.search(raw.strip())
    return match.group(0) if match else None


def normalize_version(raw: str) -> str:
    """Reduce a version string to its first two dot-separated components.

    ``"11.4.315" -> "11.4"``; a single component is kept as-is.
    """
    version = parse_version(raw)
    if version is None:
        raise ValueError(f"Not a version string: {raw!r}")
    return ".".join(version.split(".")[:2])


class VersionResolver:
    """Runs an ordered list of probes and returns the first version found.

    Parameters
    ----------
    probes:
        Zero-argument callables returning a raw version string or None.
    name:
        Label used in log messages and errors (e.g. ``"CUDA"``).
    """

    def __init__(self, probes: Sequence[Probe], *, name: str = "version") -> None:
        self._probes = list(probes)
        self.name = name

    def resolve_raw(self) -> str | None:
        """Return the first parseable raw version, or None."""
        for probe in self._probes:
            try:
                raw = probe()
            except (OSError, subprocess.SubprocessError, ValueError) as exc:
                logger.debug("%s probe %r failed: %s", self.name, probe, exc)
                continue
            version = parse_version(raw)
            if version is not None:
                logger.debug("%s probe %r yielded %s", self.name, probe, version)
                return version
        return None

    def resolve(self) -> str:
        """Return the normalized VersionKey.

        Raises
        ------
        VersionNotFoundError
            If no probe yields a parseable version.
        """
        raw = self.resolve_raw()
        if raw is None:
            raise VersionNotFoundError(
                f"{self.name} version not found on this host"
            )
        return normalize_version(raw)


# ---------------------------------------------------------------------------
# Probes
# ---------------------------------------------------------------------------


def _run(args: list[str]) -> str | None:
    result = subprocess.run(args, capture_output=True, text=True, timeout=10)
    if result.returncode != 0:
        return None
    return result.stdout


def nvcc_probe(nvcc_path: Path) -> Probe:
    def probe() -> str | None:
        if not nvcc_path.exists():
            return None
        out = _run([str(nvcc_path), "--version"])
        match = _NVCC_RELEASE_RE.search(out or "")
        return match.group(1) if match else None

    return probe


def version_json_probe(cuda_home: Path) -> Probe:
    def probe() -> str | None:
        path = cuda_home / "version.json"
        if not path.is_file():
            return None
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            return None
        entry = data.get("cuda")
        if isinstance(entry, dict):
            entry = entry.get("version")
        return entry if isinstance(entry, str) else None

    return probe


def version_txt_probe(cuda_home: Path) -> Probe:
    def probe() -> str | None:
        path = cuda_home / "version.txt"
        if not path.is_file():
            return None
        tokens = path.read_text(encoding="utf-8").split()
        return tokens[-1] if tokens else None

    return probe


def dpkg_probe(package: str = "nvidia-l4t-core") -> Probe:
    def probe() -> str | None:
        out = _run(["dpkg", "-s", package])
        match = _DPKG_VERSION_RE.search(out or "")
        return match.group(1) if match else None

    return probe


def tegra_release_probe(path: Path) -> Probe:
    def probe() -> str | None:
        if not path.is_file():
            return None
        match = _TEGRA_RELEASE_RE.search(path.read_text(encoding="utf-8"))
        return match.group(1) if match else None

    return probe


def cuda_resolver(config: ResolverConfig) -> VersionResolver:
    """Resolver for the CUDA toolkit version — the wheel selection key."""
    return VersionResolver(
        [
            nvcc_probe(config.nvcc_path),
            version_json_probe(config.cuda_home),
            version_txt_probe(config.cuda_home),
        ],
        name="CUDA",
    )


def l4t_resolver(config: ResolverConfig) -> VersionResolver:
    """Resolver for the L4T (JetPack) release."""
    return VersionResolver(
        [dpkg_probe(), tegra_release_probe(config.nv_tegra_release)],
        name="L4T",
    )
