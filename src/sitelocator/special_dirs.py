"""Directories handled by dedicated scanners.

Posts, layouts, includes, plugins and the build destination live inside the
source tree but must never be picked up by the generic page or asset scan.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import SiteConfig
from .paths import relativize, resolve_path

LOGGER = logging.getLogger(__name__)

SPECIAL_DIRECTORY_KEYS: tuple[str, ...] = ("posts", "layouts", "includes", "destination", "plugins")


def resolve_directory(config: SiteConfig, key: str, source_root: Path) -> Path | None:
    """Resolve the configured directory ``key`` against the source root."""
    resolved = resolve_path(config.get(key), base=source_root)
    if resolved is None:
        LOGGER.debug("Directory '%s' (%s) is absent", key, config.get(key))
        return None
    if not resolved.is_dir():
        LOGGER.debug("Directory '%s' (%s) is not a directory", key, resolved)
        return None
    return resolved


def special_directories(config: SiteConfig, source_root: Path) -> set[str]:
    """Return the source-relative paths of every special directory that exists.

    Directories outside the source tree, or equal to it, can't be pruned from
    a walk of the source and are left out.
    """
    excluded: set[str] = set()
    for key in SPECIAL_DIRECTORY_KEYS:
        directory = resolve_directory(config, key, source_root)
        if directory is None:
            continue
        relative = relativize(source_root, directory)
        if not relative or relative == ".." or relative.startswith("../"):
            continue
        excluded.add(relative)
    return excluded
