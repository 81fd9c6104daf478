"""Shared test fixtures for wheelvault."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from pathlib import Path

import pytest

from wheelvault.core.artifact_cache import ArtifactCache
from wheelvault.core.fetcher import FetchError
from wheelvault.models.artifacts import ArtifactRef
from wheelvault.models.config import ResolverConfig

BASE_URL = "https://wheels.example.org/jp6/cu126"


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class FakeFetcher:
    """In-memory Fetcher: serves bytes per location and records every call."""

    def __init__(self, content: dict[str, bytes] | None = None) -> None:
        self.content: dict[str, bytes] = dict(content or {})
        self.calls: list[str] = []

    def fetch(self, location: str, destination: Path) -> None:
        self.calls.append(location)
        if location not in self.content:
            raise FetchError(f"Download failed for {location}: 404 Not Found")
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.content[location])


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def cache_dir(tmp_dir: Path) -> Path:
    return tmp_dir / "whls"


@pytest.fixture
def fetcher() -> FakeFetcher:
    """Provide an empty FakeFetcher; tests register content on it."""
    return FakeFetcher()


@pytest.fixture
def cache(cache_dir: Path, fetcher: FakeFetcher) -> ArtifactCache:
    """Provide an ArtifactCache over a temp directory and the fake fetcher."""
    return ArtifactCache(cache_dir, fetcher)


@pytest.fixture
def resolver_config(cache_dir: Path, tmp_dir: Path) -> ResolverConfig:
    """ResolverConfig whose probe paths all point inside the temp dir."""
    cuda_home = tmp_dir / "cuda"
    return ResolverConfig(
        cache_dir=cache_dir,
        cuda_home=cuda_home,
        nvcc_path=cuda_home / "bin" / "nvcc",
        nv_tegra_release=tmp_dir / "nv_tegra_release",
    )


@pytest.fixture
def make_ref(fetcher: FakeFetcher) -> Callable[..., ArtifactRef]:
    """Factory fixture: build a digest-carrying ref and serve its bytes.

    ``served`` overrides what the fake server returns (to simulate a
    corrupted upstream); ``serve=False`` leaves the location unserved.
    """

    def _factory(
        file_name: str,
        content: bytes | None = None,
        *,
        served: bytes | None = None,
        serve: bool = True,
    ) -> ArtifactRef:
        content = content if content is not None else f"wheel:{file_name}".encode()
        location = f"{BASE_URL}/{file_name}"
        if serve:
            fetcher.content[location] = served if served is not None else content
        return ArtifactRef(location=location, expected_digest=sha256_hex(content))

    return _factory


@pytest.fixture
def fetcher_cls() -> type[FakeFetcher]:
    """The FakeFetcher class, for tests that need a second instance."""
    return FakeFetcher
