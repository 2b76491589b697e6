from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class ContentKind(str, Enum):
    POST = "post"
    PAGE = "page"
    LAYOUT = "layout"
    ASSET = "asset"


@dataclass(slots=True)
class FileRecord:
    """A classified source entry.

    ``relative_path`` is the directory part relative to the walk root that
    discovered the entry and ``relative_pathname`` adds the basename. Assets
    are copied verbatim, so they never carry destination paths or rendered
    content.
    """

    kind: ContentKind
    source_path: Path
    relative_path: str = ""
    is_dir: bool = False
    destination_paths: List[str] = field(default_factory=list)
    rendered_content: Optional[bytes] = None

    @property
    def basename(self) -> str:
        return self.source_path.name

    @property
    def relative_pathname(self) -> str:
        if self.is_dir:
            return self.relative_path
        if not self.relative_path:
            return self.basename
        return f"{self.relative_path}/{self.basename}"

    def add_destination_path(self, path: str) -> None:
        if self.kind is ContentKind.ASSET:
            raise ValueError(f"Asset {self.source_path} is copied verbatim and has no destination paths")
        if path not in self.destination_paths:
            self.destination_paths.append(path)

    def set_rendered_content(self, content: bytes | str) -> None:
        if self.kind is ContentKind.ASSET:
            raise ValueError(f"Asset {self.source_path} is copied verbatim and has no rendered content")
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.rendered_content = content


@dataclass(slots=True)
class DiscoveryResult:
    posts: List[FileRecord] = field(default_factory=list)
    pages: List[FileRecord] = field(default_factory=list)
    layouts: Dict[str, FileRecord] = field(default_factory=dict)
    assets: List[FileRecord] = field(default_factory=list)

    def counts(self) -> Dict[ContentKind, int]:
        return {
            ContentKind.POST: len(self.posts),
            ContentKind.PAGE: len(self.pages),
            ContentKind.LAYOUT: len(self.layouts),
            ContentKind.ASSET: sum(1 for record in self.assets if not record.is_dir),
        }


@dataclass(slots=True)
class BuildStats:
    posts: int = 0
    pages: int = 0
    layouts: int = 0
    assets: int = 0
    removed: int = 0
    errors: List[str] = field(default_factory=list)

    def register_saved(self, kind: ContentKind) -> None:
        if kind is ContentKind.POST:
            self.posts += 1
        elif kind is ContentKind.PAGE:
            self.pages += 1

    def register_error(self, message: str) -> None:
        self.errors.append(message)
