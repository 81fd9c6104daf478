"""Runtime configuration — env-driven via pydantic-settings.

Reads from a .env file and WHEELVAULT_* environment variables. Only the
CLI layer reads this; core components receive an explicit
``ResolverConfig`` built from it.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INSTALL_PACKAGES: list[str] = [
    "ultralytics[export]",
    "onnx",
    "onnxruntime",
    "onnxslim",
    "numpy<2",
]


class VaultSettings(BaseSettings):
    """Installer settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export WHEELVAULT_WHEELS_DIR=/data/whls
        export WHEELVAULT_KNOWN_FILE=/etc/wheelvault/known_wheels.toml
        export WHEELVAULT_EXTRA_INDEX_URL=https://pypi.jetson-ai-lab.dev/jp6/cu126

    Or via .env file::

        WHEELVAULT_PYTHON_VERSION=3.10
        WHEELVAULT_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="WHEELVAULT_",
        env_file_encoding="utf-8",
    )

    environment: str = "development"
    log_level: str = "INFO"

    # Virtual environment
    python_version: str = "3.10"
    venv_dir: Path = Path(".venv")
    requirements_file: Path | None = None
    extra_index_url: str = ""
    install_packages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INSTALL_PACKAGES)
    )

    # Wheel cache
    wheels_dir: Path = Path("whls")
    known_file: Path = Path("known_wheels.toml")
    wheel_pattern: str = "*.whl"
    fetch_timeout_seconds: float | None = None

    # Host probes
    cuda_home: Path = Path("/usr/local/cuda")
    nvcc_path: Path = Path("/usr/local/cuda/bin/nvcc")
    nv_tegra_release: Path = Path("/etc/nv_tegra_release")
    os_release: Path = Path("/etc/os-release")
    expected_arch: str = "aarch64"
    expected_os_codename: str = "jammy"
    required_commands: list[str] = Field(default_factory=lambda: ["uv"])

    @property
    def python_bin(self) -> Path:
        """Interpreter inside the managed virtual environment."""
        return self.venv_dir / "bin" / "python"


# Module-level singleton — import as `from wheelvault.config import config`
config = VaultSettings()
