"""Fetch-and-verify artifact cache.

Layout: ``{cache_dir}/{basename(location)}`` — one flat directory of
wheels, shared with any wheels the user dropped in by hand.

Every artifact reported as verified had its SHA-256 recomputed and
matched during the current call; a file already on disk is never
trusted on existence alone. Re-running with the same refs against an
intact cache performs no network I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from wheelvault.core.fetcher import Fetcher, FetchError
from wheelvault.core.hasher import file_matches_digest
from wheelvault.models.artifacts import ArtifactRef, LocalArtifact
from wheelvault.models.reports import CacheIssue, IssueKind

logger = logging.getLogger(__name__)


class ArtifactCache:
    """Verified, idempotent local cache of downloaded artifacts.

    Single writer: the cache directory is not locked, so concurrent
    callers must serialize their own use.

    Parameters
    ----------
    cache_dir:
        Directory holding artifact files; created if absent.
    fetcher:
        Download backend satisfying the ``Fetcher`` Protocol.
    pattern:
        Glob used by ``augment_with_local_files`` to find artifact files.
    """

    def __init__(self, cache_dir: Path, fetcher: Fetcher, *, pattern: str = "*.whl") -> None:
        self._dir = Path(cache_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._fetcher = fetcher
        self._pattern = pattern
        self.issues: list[CacheIssue] = []

    @property
    def cache_dir(self) -> Path:
        return self._dir

    def candidate_path(self, ref: ArtifactRef) -> Path:
        """Deterministic on-disk location for *ref*."""
        return self._dir / ref.file_name

    # ------------------------------------------------------------------
    # Materialize
    # ------------------------------------------------------------------

    def materialize(self, refs: Sequence[ArtifactRef]) -> list[LocalArtifact]:
        """Reuse or fetch each ref, verify it, and return the verified set.

        Input order is preserved; refs that fail are dropped with a
        warning and recorded on ``self.issues`` (reset per call). When two
        refs share a file name, the first verified one keeps the file.
        """
        self.issues = []
        result: list[LocalArtifact] = []
        claimed: set[Path] = set()
        for ref in refs:
            artifact = self._materialize_one(ref, claimed)
            if artifact is not None:
                claimed.add(artifact.path)
                result.append(artifact)
        return result

    def _materialize_one(self, ref: ArtifactRef, claimed: set[Path]) -> LocalArtifact | None:
        if not ref.is_valid:
            self._warn(IssueKind.MISSING_DIGEST, f"Skipping {ref.location}: missing checksum.", ref)
            return None
        if not ref.has_file_name:
            self._warn(
                IssueKind.INVALID_LOCATION,
                f"Skipping {ref.location}: location has no file name.",
                ref,
            )
            return None

        expected = ref.expected_digest or ""
        path = self.candidate_path(ref)
        # a verified artifact earlier in this call already owns the file
        if path in claimed:
            self._warn(
                IssueKind.DUPLICATE_NAME,
                f"Skipping {ref.location}: {path.name} is already provided by another wheel.",
                ref,
            )
            return None

        if path.is_file():
            logger.info("Found existing %s, verifying checksum...", path.name)
            if file_matches_digest(path, expected):
                logger.info("Checksum OK for %s.", path.name)
                return LocalArtifact(path=path, source_ref=ref, verified=True)
            self._warn(
                IssueKind.DIGEST_MISMATCH,
                f"Checksum mismatch for existing {path.name}; re-downloading.",
                ref,
            )
            path.unlink()

        try:
            self._fetcher.fetch(ref.location, path)
        except FetchError as exc:
            path.unlink(missing_ok=True)
            self._warn(IssueKind.FETCH_FAILURE, f"{exc}; skipping.", ref)
            return None

        if not file_matches_digest(path, expected):
            path.unlink(missing_ok=True)
            self._warn(
                IssueKind.DIGEST_MISMATCH,
                f"Invalid checksum for downloaded {path.name}; skipping.",
                ref,
            )
            return None

        logger.info("Verification successful for %s.", path.name)
        return LocalArtifact(path=path, source_ref=ref, verified=True)

    # ------------------------------------------------------------------
    # Local files
    # ------------------------------------------------------------------

    def augment_with_local_files(
        self, already: Sequence[LocalArtifact]
    ) -> list[LocalArtifact]:
        """Append cache files not in *already* as unverified artifacts.

        These are user-supplied wheels with no expected digest; trusting
        them is left to the installer. Existing entries are returned
        unchanged and in order.
        """
        seen = {a.path.resolve() for a in already}
        result = list(already)
        for path in sorted(self._dir.glob(self._pattern)):
            if not path.is_file() or path.resolve() in seen:
                continue
            logger.info("Including user-provided %s (unverified).", path.name)
            seen.add(path.resolve())
            result.append(LocalArtifact(path=path, source_ref=None, verified=False))
        return result

    def _warn(self, kind: IssueKind, message: str, ref: ArtifactRef) -> None:
        logger.warning(message)
        self.issues.append(CacheIssue(kind=kind, message=message, location=ref.location))
