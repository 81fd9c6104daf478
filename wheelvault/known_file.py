"""Known-wheel file loading — turns a human-edited file into a mapping.

Supported formats, chosen by suffix:

``.toml``
    ::

        [wheels]
        "12.6" = [
            "https://example.org/torch-2.5.0-cp310-linux_aarch64.whl#sha256=...",
        ]

``.json``
    ``{"wheels": {"12.6": ["...#sha256=..."]}}``

``.sh`` (legacy installer format)
    ::

        KNOWN_WHEELS_12_6="
        https://example.org/torch-2.5.0-cp310-linux_aarch64.whl#sha256=...
        "

    Bash arrays (``KNOWN_WHEELS_12_6=( "..." "..." )``) are accepted too.
    The ``12_6`` suffix becomes the key ``12.6``.

A file without a top-level ``wheels`` table is read as the mapping itself.
"""

from __future__ import annotations

import json
import logging
import re
import shlex
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

KnownMapping = dict[str, list[str]]

_SHELL_ASSIGN_RE = re.compile(
    r"""^[ \t]*(?:export[ \t]+|declare[ \t]+(?:-\w+[ \t]+)*)?
        KNOWN_WHEELS_(?P<key>[0-9]+(?:_[0-9]+)*)=
        (?P<value>\((?:[^)]*)\)|"[^"]*"|'[^']*')""",
    re.MULTILINE | re.VERBOSE,
)


class KnownFileError(ValueError):
    """Raised when a known-wheel file exists but cannot be parsed."""


def load_known_artifacts(path: Path) -> KnownMapping | None:
    """Load the known-wheel mapping from *path*.

    Returns None when the file does not exist (the lookup then reports
    the configuration as missing). Raises ``KnownFileError`` for a file
    that exists but is malformed.
    """
    path = Path(path)
    if not path.is_file():
        logger.warning("%s not found; predefined wheel mappings disabled.", path)
        return None

    logger.info("Loading wheel mappings from %s", path)
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            data: Any = tomllib.loads(text)
        elif suffix == ".json":
            data = json.loads(text)
        elif suffix in (".sh", ".bash", ".env"):
            return parse_shell_mapping(text)
        else:
            raise KnownFileError(f"Unsupported known-wheel file type: {path.name}")
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise KnownFileError(f"Malformed known-wheel file {path}: {exc}") from exc

    return _coerce_mapping(data, source=path)


def parse_shell_mapping(text: str) -> KnownMapping:
    """Parse ``KNOWN_WHEELS_<major>_<minor>`` assignments from shell source."""
    mapping: KnownMapping = {}
    for match in _SHELL_ASSIGN_RE.finditer(text):
        key = match.group("key").replace("_", ".")
        value = match.group("value")
        if value.startswith("("):
            entries = shlex.split(value[1:-1], comments=True)
        else:
            entries = value[1:-1].splitlines()
        mapping[key] = [e.strip() for e in entries if e.strip()]
    return mapping


def _coerce_mapping(data: Any, *, source: Path) -> KnownMapping:
    if isinstance(data, dict) and "wheels" in data:
        data = data["wheels"]
    if not isinstance(data, dict):
        raise KnownFileError(f"{source}: expected a table of version keys")

    mapping: KnownMapping = {}
    for key, entries in _flatten_keys(data):
        if isinstance(entries, str):
            entries = entries.splitlines()
        if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
            raise KnownFileError(
                f"{source}: entries for {key!r} must be a list of strings"
            )
        mapping[str(key)] = [e.strip() for e in entries if e.strip()]
    return mapping


def _flatten_keys(data: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    # Unquoted TOML keys like 12.6 parse as nested tables {"12": {"6": [...]}}.
    items: list[tuple[str, Any]] = []
    for key, value in data.items():
        full = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            items.extend(_flatten_keys(value, full))
        else:
            items.append((full, value))
    return items
