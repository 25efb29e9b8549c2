"""Resolution of include paths relative to the including file."""

from __future__ import annotations

import os
from pathlib import Path

_MAX_PARENT_STEPS = 5


class PathTraversalError(ValueError):
    """An include path climbs too far above the including file."""

    def __init__(self, message: str = "path traversal detected") -> None:
        super().__init__(message)


def _clean(path: str) -> str:
    cleaned = os.path.normpath(path)
    if cleaned.startswith("//") and not cleaned.startswith("///"):
        cleaned = cleaned[1:]
    return cleaned


def _home_dir() -> str | None:
    try:
        return str(Path.home())
    except RuntimeError:
        return None


def _is_suspicious(path: str) -> bool:
    parts = _clean(path).split(os.sep)
    return sum(1 for part in parts if part == "..") > _MAX_PARENT_STEPS


def resolve_path_safe(base_path: str, include_path: str) -> str:
    """Resolve ``include_path`` against the directory of ``base_path``.

    Raises PathTraversalError when a relative path climbs too many levels up.
    """
    if include_path.startswith("~"):
        home = _home_dir()
        if home is not None:
            if include_path == "~":
                return home
            if include_path.startswith("~/"):
                include_path = os.path.join(home, include_path[2:])

    if os.path.isabs(include_path):
        return _clean(include_path)

    base_dir = os.path.dirname(base_path) or "."
    resolved = _clean(os.path.join(base_dir, include_path))

    if _is_suspicious(include_path):
        raise PathTraversalError()

    return resolved


def resolve_path(base_path: str, include_path: str) -> str:
    """Like resolve_path_safe, but returns an empty string on traversal."""
    try:
        return resolve_path_safe(base_path, include_path)
    except PathTraversalError:
        return ""


def is_glob_pattern(path: str) -> bool:
    return any(ch in path for ch in "*?[") or "<->" in path


def convert_hledger_glob(pattern: str) -> str:
    """Turn the ``<->`` recursive wildcard into ``**``."""
    return pattern.replace("<->", "**")