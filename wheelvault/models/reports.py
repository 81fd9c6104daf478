"""Report models — non-fatal cache issues, host preflight, acquisition results."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from wheelvault.models.artifacts import LocalArtifact


class IssueKind(str, Enum):
    """Categories of non-fatal problems recorded during acquisition."""

    CONFIG_MISSING = "config_missing"
    UNKNOWN_VERSION = "unknown_version"
    MISSING_DIGEST = "missing_digest"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    DIGEST_MISMATCH = "digest_mismatch"
    FETCH_FAILURE = "fetch_failure"
    INVALID_LOCATION = "invalid_location"
    DUPLICATE_NAME = "duplicate_name"


class CacheIssue(BaseModel):
    """A warning-level problem: something was skipped, the run went on."""

    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    message: str
    location: str | None = None


class HostReport(BaseModel):
    """Result of host preflight checks. Warnings only, never fatal."""

    model_config = ConfigDict(frozen=True)

    architecture: str
    os_codename: str | None = None
    cuda_version: str | None = None
    l4t_version: str | None = None
    missing_commands: list[str] = []
    warnings: list[str] = []


class AcquisitionResult(BaseModel):
    """Outcome of one acquisition run.

    ``verified`` holds artifacts matched against a known digest this run;
    ``unverified`` holds user-supplied files found in the cache directory.
    """

    model_config = ConfigDict(frozen=True)

    version_key: str
    cache_dir: Path
    verified: list[LocalArtifact] = []
    unverified: list[LocalArtifact] = []
    issues: list[CacheIssue] = []

    @property
    def ready_paths(self) -> list[Path]:
        """Install order: verified artifacts first, then local ones."""
        return [a.path for a in self.verified] + [a.path for a in self.unverified]

    @property
    def fallback_required(self) -> bool:
        """True when nothing is available locally and the caller must use the index."""
        return not self.ready_paths
