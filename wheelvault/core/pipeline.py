"""Acquisition pipeline — resolve, look up, materialize, augment.

Wires the VersionResolver, KnownArtifactLookup and ArtifactCache into a
single run and applies the fatal/non-fatal policy: only a missing version
stops the pipeline; everything else shrinks the result and is reported.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from wheelvault.core.artifact_cache import ArtifactCache
from wheelvault.core.fetcher import Fetcher, RequestsFetcher
from wheelvault.core.known_artifacts import KnownArtifactLookup
from wheelvault.core.version_resolver import VersionResolver, cuda_resolver
from wheelvault.models.config import ResolverConfig
from wheelvault.models.reports import AcquisitionResult

logger = logging.getLogger(__name__)


class AcquisitionPipeline:
    """One acquisition run over an explicit configuration.

    Parameters
    ----------
    config:
        Resolver configuration (cache directory, probe paths).
    lookup:
        Known-artifact lookup over the already-parsed mapping.
    resolver:
        Version resolver; defaults to the CUDA resolver for *config*.
    cache:
        Artifact cache; defaults to one over ``config.cache_dir`` using
        *fetcher* (``RequestsFetcher`` when omitted).
    """

    def __init__(
        self,
        config: ResolverConfig,
        lookup: KnownArtifactLookup,
        *,
        resolver: VersionResolver | None = None,
        cache: ArtifactCache | None = None,
        fetcher: Fetcher | None = None,
    ) -> None:
        self.config = config
        self.lookup = lookup
        self.resolver = resolver or cuda_resolver(config)
        self.cache = cache or ArtifactCache(
            config.cache_dir,
            fetcher or RequestsFetcher(),
            pattern=config.wheel_pattern,
        )

    @classmethod
    def from_mapping(
        cls,
        config: ResolverConfig,
        mapping: Mapping[str, Sequence[str]] | None,
        **kwargs,
    ) -> AcquisitionPipeline:
        return cls(config, KnownArtifactLookup(mapping), **kwargs)

    def run(self, version_key: str | None = None) -> AcquisitionResult:
        """Execute the acquisition flow.

        Parameters
        ----------
        version_key:
            Use this key instead of probing the host.

        Raises
        ------
        VersionNotFoundError
            If no key is given and the resolver finds no version.
        """
        key = version_key or self.resolver.resolve()
        logger.info("Fetching and verifying wheels for version %s...", key)

        refs = self.lookup.lookup(key)
        verified = self.cache.materialize(refs)
        issues = list(self.lookup.issues) + list(self.cache.issues)

        combined = self.cache.augment_with_local_files(verified)
        unverified = combined[len(verified):]

        result = AcquisitionResult(
            version_key=key,
            cache_dir=self.cache.cache_dir,
            verified=verified,
            unverified=unverified,
            issues=issues,
        )

        if result.fallback_required:
            logger.warning(
                "No valid local wheels found; falling back to the public index. "
                "Index wheels may NOT include CUDA support for this board."
            )
        else:
            logger.info(
                "%d wheels ready (%d verified, %d local).",
                len(result.ready_paths),
                len(verified),
                len(unverified),
            )
        return result
