"""Mapping of classified records to paths under the destination root.

Rendered records (posts and pages) carry their own destination paths, filled
in by the rendering stage; this module validates them and turns them into
absolute paths that are guaranteed to stay inside the destination root.
Assets mirror their source-relative location.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from .errors import ConfigurationError
from .models import ContentKind, FileRecord


def _contained(destination: Path, destination_root: Path) -> Path:
    base_dir = destination_root.resolve()
    destination_resolved = destination.resolve(strict=False)
    if not destination_resolved.is_relative_to(base_dir):
        raise ConfigurationError(
            f"destination {destination_resolved} escapes destination_dir {base_dir}",
            path=destination,
        )
    return destination


def build_destinations(record: FileRecord, destination_root: Path) -> list[Path]:
    """Return the absolute paths a rendered record must be written to.

    Args:
        record: A post, page or layout record that went through rendering
        destination_root: The build destination directory

    Returns:
        Destination paths in the order the renderer declared them

    Raises:
        ConfigurationError: If the record has no destination paths, is an
            asset, or a destination escapes the destination root
    """
    if record.kind is ContentKind.ASSET:
        raise ConfigurationError(f"Asset {record.source_path} has no rendered destinations", path=record.source_path)
    if not record.destination_paths:
        raise ConfigurationError(f"No destination paths found for {record.source_path}", path=record.source_path)

    destinations: list[Path] = []
    for raw in record.destination_paths:
        relative = PurePosixPath(raw.replace("\\", "/").lstrip("/"))
        if not relative.parts:
            raise ConfigurationError(
                f"Empty destination path for {record.source_path}",
                path=record.source_path,
            )
        destination = _contained(destination_root.joinpath(*relative.parts), destination_root)
        if destination not in destinations:
            destinations.append(destination)
    return destinations


def asset_destination(record: FileRecord, destination_root: Path) -> Path:
    """Return the mirrored destination of an asset (file or directory)."""
    relative = record.relative_pathname
    if not relative:
        return destination_root
    return _contained(destination_root.joinpath(*PurePosixPath(relative).parts), destination_root)


def format_relative_destination(destination: Path, destination_dir: Path) -> str:
    """Format destination path as relative to destination directory.

    Args:
        destination: The destination path to format
        destination_dir: The base destination directory

    Returns:
        Relative path string if possible, absolute path string otherwise
    """
    try:
        relative = destination.relative_to(destination_dir)
    except ValueError:
        return str(destination)
    return relative.as_posix()
