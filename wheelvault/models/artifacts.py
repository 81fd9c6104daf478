"""Artifact reference models — known-good download locations and local copies."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Literal
from urllib.parse import unquote, urlparse

from pydantic import BaseModel, ConfigDict

DigestAlgorithm = Literal["sha256"]


class ArtifactRef(BaseModel):
    """A known-good download location paired with its expected digest.

    A ref without an ``expected_digest`` is invalid: it is rejected at
    lookup time and never fetched.
    """

    model_config = ConfigDict(frozen=True)

    location: str  # http(s) URL
    expected_digest: str | None = None  # lowercase hex
    algorithm: DigestAlgorithm = "sha256"

    @property
    def is_valid(self) -> bool:
        """Whether the ref carries a non-empty expected digest."""
        return bool(self.expected_digest)

    @property
    def file_name(self) -> str:
        """Basename of the location's path — the on-disk artifact name."""
        return PurePosixPath(unquote(urlparse(self.location).path)).name

    @property
    def has_file_name(self) -> bool:
        """Whether the location ends in a usable file name."""
        return self.file_name not in ("", ".", "..")


class LocalArtifact(BaseModel):
    """An artifact file present in the cache directory.

    ``verified`` is True only when the file's digest matched the source
    ref's expected digest during the current run.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    source_ref: ArtifactRef | None = None
    verified: bool = False
