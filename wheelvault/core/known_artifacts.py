"""Known-artifact lookup — VersionKey to ordered, digest-carrying refs.

The backing mapping is human-edited: each version key lists entries of
the form ``<location>#<algorithm>=<digesthex>``. Entries that cannot be
verified (no digest, unsupported algorithm) are dropped here so they
never reach the fetch phase.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from wheelvault.models.artifacts import ArtifactRef
from wheelvault.models.reports import CacheIssue, IssueKind

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS: frozenset[str] = frozenset({"sha256"})


def parse_entry(entry: str) -> tuple[str, str | None, str | None]:
    """Split ``location#algorithm=digest`` into its three parts.

    Splits at the first ``#``. Missing parts come back as None.
    """
    location, sep, fragment = entry.strip().partition("#")
    if not sep:
        return location, None, None
    algorithm, eq, digest = fragment.partition("=")
    if not eq:
        return location, None, None
    return location, algorithm.strip().lower() or None, digest.strip().lower() or None


class KnownArtifactLookup:
    """Maps a VersionKey to the ordered ArtifactRefs configured for it.

    Parameters
    ----------
    mapping:
        Parsed known-artifact mapping, or None when no configuration was
        loaded (degrades to "no known artifacts").
    """

    def __init__(self, mapping: Mapping[str, Sequence[str]] | None) -> None:
        self._mapping = mapping
        self.issues: list[CacheIssue] = []

    @property
    def configured(self) -> bool:
        return self._mapping is not None

    def keys(self) -> list[str]:
        return sorted(self._mapping) if self._mapping else []

    def lookup(self, key: str) -> list[ArtifactRef]:
        """Return refs for *key*, in configuration order. Never raises.

        Issues encountered are logged and recorded on ``self.issues``
        (reset on every call).
        """
        self.issues = []

        if self._mapping is None:
            self._warn(
                IssueKind.CONFIG_MISSING,
                "No known-artifact configuration loaded; predefined wheels disabled.",
            )
            return []

        entries = self._mapping.get(key)
        if not entries:
            self._warn(
                IssueKind.UNKNOWN_VERSION,
                f"No predefined wheels found for version {key}.",
            )
            return []

        refs: list[ArtifactRef] = []
        for entry in entries:
            if not entry or not entry.strip():
                continue
            location, algorithm, digest = parse_entry(entry)
            if not digest:
                self._warn(
                    IssueKind.MISSING_DIGEST,
                    f"Skipping {location}: missing checksum.",
                    location,
                )
                continue
            if algorithm not in SUPPORTED_ALGORITHMS:
                self._warn(
                    IssueKind.UNSUPPORTED_ALGORITHM,
                    f"Skipping {location}: unsupported digest algorithm {algorithm!r}.",
                    location,
                )
                continue
            ref = ArtifactRef(location=location, expected_digest=digest)
            if not ref.has_file_name:
                self._warn(
                    IssueKind.INVALID_LOCATION,
                    f"Skipping {location}: location has no file name.",
                    location,
                )
                continue
            refs.append(ref)

        logger.info("Found %d predefined wheels for version %s.", len(refs), key)
        return refs

    def _warn(self, kind: IssueKind, message: str, location: str | None = None) -> None:
        logger.warning(message)
        self.issues.append(CacheIssue(kind=kind, message=message, location=location))
