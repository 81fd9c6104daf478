"""Unit tests for the CLI — Typer command registration and basic behavior.

Exercises command registration, help output and the fetch / install /
known / detect flows via typer.testing.CliRunner, with the network and
``uv`` replaced by in-process fakes.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from wheelvault.cli.app import app
from wheelvault.cli.commands import detect as detect_module
from wheelvault.cli.commands import fetch as fetch_module
from wheelvault.cli.commands.install import summarize_packages
from wheelvault.core import installer as installer_module
from wheelvault.core.installer import InstallError
from wheelvault.models.reports import HostReport

runner = CliRunner()


@pytest.fixture
def known_file(tmp_dir: Path, make_ref) -> Path:
    """A TOML known-wheel file with one served wheel for key 12.6."""
    ref = make_ref("torch-2.5.0-cp310-cp310-linux_aarch64.whl")
    path = tmp_dir / "known_wheels.toml"
    path.write_text(
        f'[wheels]\n"12.6" = ["{ref.location}#sha256={ref.expected_digest}"]\n'
    )
    return path


@pytest.fixture
def fake_network(monkeypatch, fetcher):
    monkeypatch.setattr(fetch_module, "RequestsFetcher", lambda timeout=None: fetcher)
    return fetcher


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    """The CLI must register all expected commands and show help."""

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        # Typer's no_args_is_help may exit with 0 or 2 depending on version
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for name in ("detect", "known", "fetch", "install"):
            assert name in result.output

    @pytest.mark.parametrize("command", ["detect", "known", "fetch", "install"])
    def test_command_exists(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# Test: fetch
# ---------------------------------------------------------------------------


class TestFetchCommand:
    def test_fetch_downloads_and_verifies(self, known_file, cache_dir, fake_network):
        result = runner.invoke(app, [
            "fetch", "--key", "12.6",
            "--known-file", str(known_file),
            "--wheels-dir", str(cache_dir),
        ])
        assert result.exit_code == 0, result.output
        assert (cache_dir / "torch-2.5.0-cp310-cp310-linux_aarch64.whl").is_file()
        assert len(fake_network.calls) == 1

    def test_fetch_full_version_key_is_normalized(self, known_file, cache_dir, fake_network):
        result = runner.invoke(app, [
            "fetch", "--key", "12.6.68",
            "--known-file", str(known_file),
            "--wheels-dir", str(cache_dir),
        ])
        assert result.exit_code == 0, result.output
        assert len(fake_network.calls) == 1

    def test_fetch_non_version_key_exits(self, known_file, cache_dir, fake_network):
        result = runner.invoke(app, [
            "fetch", "--key", "latest",
            "--known-file", str(known_file),
            "--wheels-dir", str(cache_dir),
        ])
        assert result.exit_code == 1
        assert "Invalid --key" in result.output
        assert fake_network.calls == []

    def test_fetch_unknown_key_is_not_fatal(self, known_file, cache_dir, fake_network):
        result = runner.invoke(app, [
            "fetch", "--key", "9.9",
            "--known-file", str(known_file),
            "--wheels-dir", str(cache_dir),
        ])
        assert result.exit_code == 0
        assert "No valid local wheels found" in result.output
        assert fake_network.calls == []

    def test_fetch_missing_known_file_is_not_fatal(self, tmp_dir, cache_dir, fake_network):
        result = runner.invoke(app, [
            "fetch", "--key", "12.6",
            "--known-file", str(tmp_dir / "absent.toml"),
            "--wheels-dir", str(cache_dir),
        ])
        assert result.exit_code == 0
        assert "config_missing" in result.output

    def test_fetch_malformed_known_file_exits(self, tmp_dir, cache_dir, fake_network):
        bad = tmp_dir / "known_wheels.toml"
        bad.write_text("[wheels\n")
        result = runner.invoke(app, [
            "fetch", "--key", "12.6", "--known-file", str(bad), "--wheels-dir", str(cache_dir),
        ])
        assert result.exit_code == 1

    def test_fetch_without_cuda_exits(self, known_file, cache_dir, fake_network, monkeypatch, tmp_dir):
        settings = fetch_module.settings.model_copy(update={
            "cuda_home": tmp_dir / "no-cuda",
            "nvcc_path": tmp_dir / "no-cuda" / "bin" / "nvcc",
        })
        monkeypatch.setattr(fetch_module, "settings", settings)
        result = runner.invoke(app, [
            "fetch", "--known-file", str(known_file), "--wheels-dir", str(cache_dir),
        ])
        assert result.exit_code == 1
        assert "not found" in result.output


# ---------------------------------------------------------------------------
# Test: known
# ---------------------------------------------------------------------------


class TestKnownCommand:
    def test_lists_refs(self, known_file):
        result = runner.invoke(app, ["known", "--key", "12.6", "--known-file", str(known_file)])
        assert result.exit_code == 0
        assert "12.6" in result.output

    def test_full_version_key_is_normalized(self, known_file):
        result = runner.invoke(app, ["known", "--key", "12.6.68", "--known-file", str(known_file)])
        assert result.exit_code == 0
        assert "No usable wheels" not in result.output

    def test_unknown_key(self, known_file):
        result = runner.invoke(app, ["known", "--key", "9.9", "--known-file", str(known_file)])
        assert result.exit_code == 0
        assert "No usable wheels" in result.output


# ---------------------------------------------------------------------------
# Test: detect
# ---------------------------------------------------------------------------


class TestDetectCommand:
    def test_detect_reports_key(self, monkeypatch):
        report = HostReport(architecture="aarch64", os_codename="jammy", cuda_version="12.6.68")
        monkeypatch.setattr(detect_module, "inspect_host", lambda settings: report)
        result = runner.invoke(app, ["detect"])
        assert result.exit_code == 0
        assert "12.6" in result.output

    def test_detect_without_cuda_exits(self, monkeypatch):
        report = HostReport(architecture="x86_64", warnings=["Non-aarch64 host detected"])
        monkeypatch.setattr(detect_module, "inspect_host", lambda settings: report)
        result = runner.invoke(app, ["detect"])
        assert result.exit_code == 1
        assert "CUDA not found" in result.output


# ---------------------------------------------------------------------------
# Test: install
# ---------------------------------------------------------------------------


class TestInstallCommand:
    def test_install_hands_wheels_to_uv(self, known_file, cache_dir, tmp_dir, fake_network, monkeypatch):
        commands: list[list[str]] = []

        def record(args: list[str]) -> str:
            commands.append(args)
            if "list" in args:
                return "Package    Version\n---------- -------\nnumpy      1.26.4\ntorch      2.5.0\n"
            return ""

        monkeypatch.setattr(installer_module, "subprocess_runner", record)
        result = runner.invoke(app, [
            "install", "--key", "12.6",
            "--known-file", str(known_file),
            "--wheels-dir", str(cache_dir),
            "--venv", str(tmp_dir / ".venv"),
            "--skip-packages",
        ])
        assert result.exit_code == 0, result.output

        no_deps = [c for c in commands if "--no-deps" in c]
        assert len(no_deps) == 1
        assert no_deps[0][-1] == str(cache_dir / "torch-2.5.0-cp310-cp310-linux_aarch64.whl")
        assert "Installed packages" in result.output
        assert "numpy      1.26.4" in result.output

    def test_install_failure_exits(self, known_file, cache_dir, tmp_dir, fake_network, monkeypatch):
        def fail(args: list[str]) -> str:
            raise InstallError("Command not found: uv")

        monkeypatch.setattr(installer_module, "subprocess_runner", fail)
        result = runner.invoke(app, [
            "install", "--key", "12.6",
            "--known-file", str(known_file),
            "--wheels-dir", str(cache_dir),
            "--venv", str(tmp_dir / ".venv"),
        ])
        assert result.exit_code == 1
        assert "Installation failed" in result.output


class TestSummarizePackages:
    def test_short_listing_unchanged(self):
        assert summarize_packages("a 1\nb 2\n") == "a 1\nb 2"

    def test_long_listing_truncated(self):
        listing = "\n".join(f"pkg{i} 1.0" for i in range(100))
        summary = summarize_packages(listing).splitlines()

        assert len(summary) == 81
        assert summary[79] == "pkg79 1.0"
        assert summary[-1] == "... (20 more)"
