"""sitelocator core package.

The package is organized into focused modules:

- **file_discovery**: classification of source files into posts, pages,
  layouts and passthrough assets (``ContentFinder``)
- **walker**: recursive directory walking with name and path filters
- **special_dirs**: directories handled by dedicated scanners
- **destination_builder**: mapping records to destination paths
- **writer**: saving rendered records, copying assets, cleaning output
- **builder**: sequencing a full build around an injected renderer
- **config** / **validation**: loading and validating ``config.yml``

The usual entry points are ``ContentFinder``, ``SiteWriter`` and
``SiteBuilder``.
"""

from .builder import Renderer, SiteBuilder
from .config import SiteConfig, load_config
from .errors import ConfigurationError, SiteLocatorError
from .file_discovery import ContentFinder
from .models import ContentKind, FileRecord
from .version import __version__
from .writer import SiteWriter

__all__ = [
    "__version__",
    "ConfigurationError",
    "ContentFinder",
    "ContentKind",
    "FileRecord",
    "Renderer",
    "SiteBuilder",
    "SiteConfig",
    "SiteLocatorError",
    "SiteWriter",
    "load_config",
]
