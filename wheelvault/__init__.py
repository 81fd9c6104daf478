"""wheelvault: verified wheel acquisition cache for embedded GPU boards.

  - Detects the CUDA toolkit (and L4T release) to pick a version key
  - Looks up known-good wheel URLs + SHA-256 digests for that key
  - Fetches into a local cache, re-verifying every copy on every run
  - Hands verified wheels, then user-supplied ones, to ``uv pip --no-deps``
"""

__version__ = "0.1.0"
__description__ = "Verified wheel cache and isolated venv installer for Jetson boards"

from wheelvault.core.artifact_cache import ArtifactCache
from wheelvault.core.known_artifacts import KnownArtifactLookup
from wheelvault.core.pipeline import AcquisitionPipeline
from wheelvault.core.version_resolver import VersionNotFoundError, VersionResolver

__all__ = [
    "AcquisitionPipeline",
    "ArtifactCache",
    "KnownArtifactLookup",
    "VersionNotFoundError",
    "VersionResolver",
    "__version__",
]
