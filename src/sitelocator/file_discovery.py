"""Classification of source files into posts, pages, layouts and assets.

Every discovery call re-walks the live filesystem and returns fresh records;
nothing is cached between calls. A configured directory that does not exist
turns the matching discovery into an empty result rather than an error.

Override precedence for ``include``/``exclude``:

- an included directory becomes an extra walk root and its entries go
  through the same extension and ``exclude`` filters as the source walk;
- an included file is appended after filtering, so ``exclude`` never
  removes it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from .config import SiteConfig
from .errors import ConfigurationError
from .extensions import build_matcher, combine_extensions
from .logging_utils import render_fields_block, render_section_block
from .models import ContentKind, DiscoveryResult, FileRecord
from .paths import relative_within, resolve_path
from .special_dirs import resolve_directory, special_directories
from .walker import Finder, WalkEntry

LOGGER = logging.getLogger(__name__)


def index_by_relative_path(records: Iterable[FileRecord]) -> dict[str, FileRecord]:
    """Key records by relative pathname; a later record replaces an earlier one."""
    index: dict[str, FileRecord] = {}
    for record in records:
        if record.relative_pathname in index:
            LOGGER.debug(
                render_fields_block(
                    "Duplicate Layout Replaced",
                    {
                        "Key": record.relative_pathname,
                        "Previous": index[record.relative_pathname].source_path,
                        "Current": record.source_path,
                    },
                )
            )
        index[record.relative_pathname] = record
    return index


def _to_record(entry: WalkEntry, kind: ContentKind) -> FileRecord:
    return FileRecord(kind=kind, source_path=entry.path, relative_path=entry.relative_path, is_dir=entry.is_dir)


class ContentFinder:
    """Locates the content of a site described by a :class:`SiteConfig`."""

    def __init__(self, config: SiteConfig) -> None:
        source_root = resolve_path(config.source)
        if source_root is None or not source_root.is_dir():
            raise ConfigurationError(f"Source directory not found: {config.source}", path=config.source)
        self.config = config
        self.source_dir = source_root
        self._validate_overrides()

    def _validate_overrides(self) -> None:
        for key in ("include", "exclude"):
            for entry in self.config.get(key) or ():
                if not isinstance(entry, str) or not entry.strip():
                    raise ConfigurationError(f"Unusable '{key}' entry: {entry!r}", path=entry)

    @property
    def posts_dir(self) -> Path | None:
        return resolve_directory(self.config, "posts", self.source_dir)

    @property
    def layouts_dir(self) -> Path | None:
        return resolve_directory(self.config, "layouts", self.source_dir)

    @property
    def includes_dir(self) -> Path | None:
        return resolve_directory(self.config, "includes", self.source_dir)

    @property
    def plugins_dir(self) -> Path | None:
        return resolve_directory(self.config, "plugins", self.source_dir)

    @property
    def destination_dir(self) -> Path | None:
        return resolve_directory(self.config, "destination", self.source_dir)

    def processable_extensions(self) -> tuple[str, ...]:
        """Union of ``processable_ext`` and ``markdown_ext``."""
        return combine_extensions(self.config.processable_ext, self.config.markdown_ext)

    def find_posts(self) -> list[FileRecord]:
        markdown_ext = self.config.markdown_ext
        if not markdown_ext:
            return []
        posts_dir = self.posts_dir
        if posts_dir is None:
            return []

        finder = Finder().in_(posts_dir).files().name(build_matcher(markdown_ext))
        posts = [_to_record(entry, ContentKind.POST) for entry in finder]
        LOGGER.debug(render_fields_block("Posts Discovered", {"Directory": posts_dir, "Count": len(posts)}))
        return posts

    def find_pages(self) -> list[FileRecord]:
        processable = self.processable_extensions()
        if not processable:
            return []
        is_processable = build_matcher(processable)

        finder = Finder().in_(self.source_dir).exclude(special_directories(self.config, self.source_dir))
        finder.files().name(is_processable)
        forced = self._apply_includes(finder, accept_file=is_processable)
        self._apply_excludes(finder)
        finder.append(forced)

        pages = [_to_record(entry, ContentKind.PAGE) for entry in finder]
        self._log_discovery("Pages Discovered", finder, pages, forced)
        return pages

    def find_layouts(self) -> dict[str, FileRecord]:
        layouts_dir = self.layouts_dir
        if layouts_dir is None:
            return {}
        finder = Finder().in_(layouts_dir).files()
        layouts = index_by_relative_path(_to_record(entry, ContentKind.LAYOUT) for entry in finder)
        LOGGER.debug(render_fields_block("Layouts Discovered", {"Directory": layouts_dir, "Count": len(layouts)}))
        return layouts

    def find_assets(self) -> list[FileRecord]:
        """Return everything that is not a post, page, layout or the config file."""
        is_processable = build_matcher(self.processable_extensions())

        finder = Finder().in_(self.source_dir).exclude(special_directories(self.config, self.source_dir))
        finder.not_name(self.config.config_filename)
        finder.not_name(is_processable)
        forced = self._apply_includes(finder, accept_file=lambda name: not is_processable(name))
        self._apply_excludes(finder)
        finder.append(forced)

        assets = [_to_record(entry, ContentKind.ASSET) for entry in finder]
        self._log_discovery("Assets Discovered", finder, assets, forced)
        return assets

    def discover_all(self) -> DiscoveryResult:
        return DiscoveryResult(
            posts=self.find_posts(),
            pages=self.find_pages(),
            layouts=self.find_layouts(),
            assets=self.find_assets(),
        )

    def get_item(self, path: str | Path) -> FileRecord | None:
        """Wrap a single existing path as a page record.

        The relative path is computed against the source root and collapses to
        ``""`` when the item lies outside it.
        """
        resolved = resolve_path(path, base=self.source_dir)
        if resolved is None:
            return None
        return FileRecord(
            kind=ContentKind.PAGE,
            source_path=resolved,
            relative_path=relative_within(self.source_dir, resolved.parent),
        )

    def _apply_includes(self, finder: Finder, *, accept_file: Callable[[str], bool]) -> list[WalkEntry]:
        forced: list[WalkEntry] = []
        for item in self.config.include:
            target = resolve_path(item, base=self.source_dir)
            if target is None:
                LOGGER.warning(render_fields_block("Include Not Found", {"Entry": item, "Source": self.source_dir}))
                continue
            if target.is_dir():
                finder.in_(target)
            elif target.is_file() and accept_file(target.name):
                forced.append(WalkEntry.detached(target))
        return forced

    def _apply_excludes(self, finder: Finder) -> None:
        for pattern in self.config.exclude:
            finder.not_path(pattern)

    @staticmethod
    def _log_discovery(title: str, finder: Finder, records: list[FileRecord], forced: list[WalkEntry]) -> None:
        if not LOGGER.isEnabledFor(logging.DEBUG):
            return
        LOGGER.debug(
            render_section_block(
                title,
                [
                    ("Walk Roots", finder.roots),
                    ("Forced Includes", [entry.path for entry in forced]),
                ],
                fields={"Count": len(records)},
            )
        )
