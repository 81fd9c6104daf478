"""wheelvault data models — all Pydantic v2, all frozen (immutable)."""

from wheelvault.models.artifacts import ArtifactRef, LocalArtifact
from wheelvault.models.config import ResolverConfig
from wheelvault.models.reports import (
    AcquisitionResult,
    CacheIssue,
    HostReport,
    IssueKind,
)

__all__ = [
    # artifacts
    "ArtifactRef",
    "LocalArtifact",
    # config
    "ResolverConfig",
    # reports
    "AcquisitionResult",
    "CacheIssue",
    "HostReport",
    "IssueKind",
]
