"""Filesystem effects against the destination tree.

Every operation stops at the first failure and leaves already written files
in place. Calls touching the same destination subtree must not overlap.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .config import SiteConfig
from .destination_builder import asset_destination, build_destinations, format_relative_destination
from .errors import ConfigurationError
from .logging_utils import render_fields_block
from .models import ContentKind, FileRecord
from .paths import resolve_path
from .utils import copy_file, ensure_directory, remove_path, write_bytes

LOGGER = logging.getLogger(__name__)


def destination_root_for(config: SiteConfig) -> Path:
    """Absolute destination directory, anchored to the source root when relative."""
    destination = Path(config.destination).expanduser()
    if not destination.is_absolute():
        source = resolve_path(config.source)
        if source is None:
            raise ConfigurationError(f"Source directory not found: {config.source}", path=config.source)
        destination = source / destination
    return destination


class SiteWriter:
    def __init__(self, config: SiteConfig) -> None:
        self.config = config
        self.destination_dir = destination_root_for(config)
        self.ensure_destination_exists()
        self.destination_dir = self.destination_dir.resolve()

    def ensure_destination_exists(self) -> None:
        if self.destination_dir.is_dir():
            return
        ensure_directory(self.destination_dir)
        LOGGER.debug(render_fields_block("Destination Created", {"Path": self.destination_dir}))

    def save(self, record: FileRecord) -> list[Path]:
        """Write ``record.rendered_content`` to each of its destinations.

        Destinations are validated before anything is written.
        """
        destinations = build_destinations(record, self.destination_dir)
        if record.rendered_content is None:
            raise ConfigurationError(f"Record {record.source_path} has not been rendered", path=record.source_path)

        for destination in destinations:
            write_bytes(destination, record.rendered_content)
        LOGGER.debug(
            render_fields_block(
                "Saved",
                {
                    "Source": record.source_path,
                    "Kind": record.kind.value,
                    "Destinations": [
                        format_relative_destination(path, self.destination_dir) for path in destinations
                    ],
                },
            )
        )
        return destinations

    def copy_assets(self, records: Iterable[FileRecord]) -> list[Path]:
        """Mirror asset records into the destination; return the copied source files."""
        copied: list[Path] = []
        for record in records:
            if record.kind is not ContentKind.ASSET:
                raise ConfigurationError(
                    f"Only assets are copied verbatim: {record.source_path}",
                    path=record.source_path,
                )
            destination = asset_destination(record, self.destination_dir)
            if record.is_dir:
                if not destination.exists():
                    ensure_directory(destination)
                continue
            copy_file(record.source_path, destination)
            copied.append(record.source_path)
            LOGGER.debug(
                render_fields_block(
                    "Asset Copied",
                    {
                        "Source": record.source_path,
                        "Destination": format_relative_destination(destination, self.destination_dir),
                    },
                )
            )
        return copied

    def cleanup_destination(self) -> list[Path]:
        """Remove every direct child of the destination directory.

        Irreversible. The destination directory itself is kept. Raises
        ``ConfigurationError`` when the destination is the source root or one
        of its ancestors.
        """
        source = resolve_path(self.config.source)
        if source is not None and (self.destination_dir == source or self.destination_dir in source.parents):
            raise ConfigurationError(
                f"Refusing to clean {self.destination_dir}: it contains the source directory {source}",
                path=self.destination_dir,
            )
        removed: list[Path] = []
        if not self.destination_dir.is_dir():
            return removed
        for child in sorted(self.destination_dir.iterdir()):
            remove_path(child)
            removed.append(child)
        LOGGER.info(
            render_fields_block(
                "Destination Cleaned",
                {"Path": self.destination_dir, "Removed": len(removed)},
            )
        )
        return removed
