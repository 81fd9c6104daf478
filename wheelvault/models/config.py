"""Explicit resolver configuration passed into core components."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from wheelvault.config import VaultSettings


class ResolverConfig(BaseModel):
    """Everything the resolver needs, with no ambient environment reads.

    Built once per run, usually from ``VaultSettings`` via ``from_settings``.
    """

    model_config = ConfigDict(frozen=True)

    cache_dir: Path = Path("whls")
    cuda_home: Path = Path("/usr/local/cuda")
    nvcc_path: Path = Path("/usr/local/cuda/bin/nvcc")
    nv_tegra_release: Path = Path("/etc/nv_tegra_release")
    wheel_pattern: str = "*.whl"

    @classmethod
    def from_settings(
        cls, settings: VaultSettings, *, cache_dir: Path | None = None
    ) -> ResolverConfig:
        return cls(
            cache_dir=cache_dir or settings.wheels_dir,
            cuda_home=settings.cuda_home,
            nvcc_path=settings.nvcc_path,
            nv_tegra_release=settings.nv_tegra_release,
            wheel_pattern=settings.wheel_pattern,
        )
