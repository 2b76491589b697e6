"""Package version lookup."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

_FALLBACK_VERSION = "0.0.0+unknown"


def get_version() -> str:
    """Return the installed distribution version, or a fallback for source checkouts."""
    try:
        return version("sitelocator")
    except PackageNotFoundError:
        return _FALLBACK_VERSION


__version__ = get_version()
