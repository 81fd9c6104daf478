"""Installer adapter — hands verified wheels to ``uv``.

wheelvault does not manage interpreters or virtual environments itself;
it drives ``uv`` through a handful of commands:

    uv python install <version>
    uv venv --python <version> <venv_dir>
    uv pip install --python <bin> --no-deps <wheel>...
    uv pip install --python <bin> [--extra-index-url U] -r <req> | <pkg>...

The virtual environment is isolated (no ``--system-site-packages``);
the CUDA toolkit stays at system level.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

Runner = Callable[[list[str]], str]

TORCH_CUDA_CHECK = """\
try:
    import torch
    print(f'PyTorch version: {torch.__version__}')
    print(f'CUDA available: {torch.cuda.is_available()}')
    if torch.cuda.is_available():
        print(f'CUDA version: {torch.version.cuda}')
        print(f'Device count: {torch.cuda.device_count()}')
        print(f'Device name: {torch.cuda.get_device_name(0)}')
    else:
        print('CUDA not available in PyTorch; the wheel likely lacks CUDA support.')
except Exception as e:
    print(f'Error testing PyTorch: {e}')
"""


class InstallError(RuntimeError):
    """Raised when an installer command exits non-zero."""


def subprocess_runner(args: list[str]) -> str:
    """Run *args*, returning stdout; raise ``InstallError`` on failure."""
    logger.debug("Running: %s", " ".join(args))
    try:
        result = subprocess.run(args, capture_output=True, text=True, check=True)
    except FileNotFoundError as exc:
        raise InstallError(f"Command not found: {args[0]}") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or exc.stdout or "").strip()
        raise InstallError(
            f"Command failed ({exc.returncode}): {' '.join(args)}\n{detail}"
        ) from exc
    return result.stdout


class WheelInstaller:
    """Builds and runs ``uv`` commands against one virtual environment.

    Parameters
    ----------
    venv_dir:
        Location of the isolated virtual environment.
    runner:
        Callable executing an argv list and returning stdout. Defaults to
        ``subprocess_runner``.
    uv:
        Name or path of the ``uv`` executable.
    """

    def __init__(
        self,
        venv_dir: Path,
        runner: Runner | None = None,
        *,
        uv: str = "uv",
    ) -> None:
        self.venv_dir = Path(venv_dir)
        self._run = runner or subprocess_runner
        self._uv = uv

    @property
    def python_bin(self) -> Path:
        return self.venv_dir / "bin" / "python"

    def ensure_python(self, version: str) -> None:
        logger.info("Ensuring Python %s is available via uv...", version)
        self._run([self._uv, "python", "install", version])

    def ensure_venv(self, version: str) -> bool:
        """Create the venv unless it exists. Returns True if created."""
        if self.venv_dir.is_dir():
            logger.info("Existing venv found at %s; reusing.", self.venv_dir)
            return False
        logger.info("Creating isolated virtual environment at %s...", self.venv_dir)
        self._run([self._uv, "venv", "--python", version, str(self.venv_dir)])
        return True

    def install_wheels(self, paths: Sequence[Path]) -> None:
        """Install local wheels in the given order, without dependency resolution."""
        if not paths:
            return
        logger.info("Installing %d local wheels via uv pip (no dependencies)...", len(paths))
        self._run(
            [self._uv, "pip", "install", "--python", str(self.python_bin), "--no-deps"]
            + [str(p) for p in paths]
        )

    def install_packages(
        self,
        packages: Sequence[str],
        *,
        requirements_file: Path | None = None,
        extra_index_url: str = "",
    ) -> None:
        """Install a requirements file and/or a package list into the venv."""
        base = [self._uv, "pip", "install", "--python", str(self.python_bin)]
        if extra_index_url:
            base += ["--extra-index-url", extra_index_url]

        if requirements_file is not None:
            if requirements_file.is_file():
                logger.info("Installing requirements from %s...", requirements_file)
                self._run(base + ["-r", str(requirements_file)])
            else:
                logger.warning("Requirements file %s not found; skipping.", requirements_file)

        if packages:
            logger.info("Installing %d packages into venv...", len(packages))
            self._run(base + list(packages))

    def verify(self) -> dict[str, str]:
        """Report interpreter version, installed packages and torch CUDA status."""
        python = str(self.python_bin)
        return {
            "python": self._run([python, "-V"]).strip(),
            "packages": self._run([self._uv, "pip", "list", "--python", python]),
            "torch": self._run([python, "-c", TORCH_CUDA_CHECK]).strip(),
        }
