"""Artifact fetchers — the network boundary of the cache.

Defines the ``Fetcher`` Protocol the cache depends on, and
``RequestsFetcher``, the default HTTP(S) backend built on ``requests``.
Tests and offline mirrors can supply any object with a matching
``fetch`` method.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

import requests

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


class FetchError(RuntimeError):
    """Raised when an artifact cannot be downloaded."""


@runtime_checkable
class Fetcher(Protocol):
    """Protocol for download backends.

    ``fetch`` must either leave the complete artifact at *destination* or
    raise ``FetchError`` with no partial file left behind.
    """

    def fetch(self, location: str, destination: Path) -> None:
        ...


class RequestsFetcher:
    """Streaming HTTP(S) GET via a ``requests.Session``.

    Redirects are followed as ``requests`` does by default. Any non-2xx
    status is a failure.

    Parameters
    ----------
    session:
        Optional pre-configured session (proxies, auth, adapters).
    timeout:
        Seconds passed through to ``requests``; None keeps the transport
        default.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout

    def fetch(self, location: str, destination: Path) -> None:
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading %s", destination.name)
        try:
            with self._session.get(location, stream=True, timeout=self._timeout) as resp:
                resp.raise_for_status()
                with destination.open("wb") as fh:
                    for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
        except (requests.RequestException, OSError) as exc:
            if destination.is_file():
                destination.unlink()
            raise FetchError(f"Download failed for {location}: {exc}") from exc
