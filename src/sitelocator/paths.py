"""Resolution of configured directories to canonical absolute paths.

Resolution never raises: a path that does not exist resolves to ``None``
which callers treat as "feature not used" (for example a site without a
layouts directory). Relative inputs are anchored to an explicit base so
nothing here depends on the process working directory.
"""

from __future__ import annotations

import os
from pathlib import Path


def resolve_path(path: str | os.PathLike[str] | None, base: Path | None = None) -> Path | None:
    """Return the canonical absolute form of ``path`` or ``None`` when absent."""
    if path is None:
        return None
    raw = os.fspath(path)
    if not raw:
        return None
    candidate = Path(raw).expanduser()
    if not candidate.is_absolute() and base is not None:
        candidate = base / candidate
    try:
        resolved = candidate.resolve(strict=True)
    except (OSError, RuntimeError):
        return None
    return resolved


def relativize(base: Path, target: Path) -> str:
    """Return ``target`` relative to ``base`` with forward slashes and no trailing slash."""
    relative = os.path.relpath(target, base)
    relative = relative.replace(os.sep, "/").rstrip("/")
    return "" if relative == "." else relative


def relative_within(base: Path, target: Path) -> str:
    """Like :func:`relativize` but collapse to ``""`` when ``target`` escapes ``base``."""
    relative = relativize(base, target)
    if ".." in relative.split("/"):
        return ""
    return relative
