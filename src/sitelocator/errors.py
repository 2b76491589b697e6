"""Exception types raised by sitelocator."""

from __future__ import annotations


class SiteLocatorError(Exception):
    """Base class for sitelocator errors."""


class ConfigurationError(SiteLocatorError, ValueError):
    """Raised when the configuration cannot produce a build.

    Examples are an unresolvable source directory, an unusable include or
    exclude entry, or a rendered record without any destination path.
    """

    def __init__(self, message: str, *, path: object | None = None) -> None:
        super().__init__(message)
        self.path = path
