from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Protocol

from .config import SiteConfig
from .file_discovery import ContentFinder
from .logging_utils import render_fields_block
from .models import BuildStats, FileRecord
from .writer import SiteWriter

LOGGER = logging.getLogger(__name__)


class Renderer(Protocol):
    """Fills ``destination_paths`` and ``rendered_content`` of a post or page."""

    def render(self, record: FileRecord, layouts: Mapping[str, FileRecord]) -> None: ...


class SiteBuilder:
    """Sequences a build: cleanup, discovery, render and save, then asset copy.

    All writer calls run one after another on the calling thread.
    """

    def __init__(self, config: SiteConfig) -> None:
        self.config = config
        self.writer = SiteWriter(config)
        self.finder = ContentFinder(config)

    def build(self, renderer: Renderer, *, clean: bool = False, keep_going: bool = False) -> BuildStats:
        """Run a full build.

        With ``keep_going`` an ``OSError`` while saving one record is recorded in
        the stats and the build moves on; otherwise it propagates.
        """
        started = time.perf_counter()
        stats = BuildStats()

        if clean:
            stats.removed = len(self.writer.cleanup_destination())

        layouts = self.finder.find_layouts()
        stats.layouts = len(layouts)

        for record in [*self.finder.find_posts(), *self.finder.find_pages()]:
            renderer.render(record, layouts)
            try:
                self.writer.save(record)
            except OSError as exc:
                if not keep_going:
                    raise
                LOGGER.error(render_fields_block("Save Failed", {"Source": record.source_path, "Error": exc}))
                stats.register_error(f"{record.source_path}: {exc}")
                continue
            stats.register_saved(record.kind)

        stats.assets = len(self.writer.copy_assets(self.finder.find_assets()))

        LOGGER.info(
            render_fields_block(
                "Build Complete",
                {
                    "Source": self.finder.source_dir,
                    "Destination": self.writer.destination_dir,
                    "Posts": stats.posts,
                    "Pages": stats.pages,
                    "Layouts": stats.layouts,
                    "Assets": stats.assets,
                    "Errors": len(stats.errors),
                    "Elapsed": f"{time.perf_counter() - started:.2f}s",
                },
            )
        )
        return stats
