"""Recursive directory walking with name and path filters.

:class:`Finder` is a small fluent builder: configure one or more roots, the
directories to prune, name and path filters, and any synthetic entries to
append, then iterate. Filters never apply to appended entries.

Path patterns given to :meth:`Finder.not_path` are tested against the
pathname relative to the walk root that produced the entry, never the
absolute path. An absolute-path pattern such as ``/srv/site/drafts`` never
matches; write ``drafts`` instead.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path

from .errors import ConfigurationError
from .validation import compile_regex_pattern

VCS_DIRECTORIES = frozenset({".git", ".svn", ".hg", "CVS", "_darcs", ".bzr", ".arch-params", ".monotone"})

_GLOB_CHARS = re.compile(r"[*?\[]")

NamePredicate = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """An entry produced by a walk.

    ``relative_path`` is relative to ``root``: the parent directory for files,
    the directory itself for directories. Appended entries have no root.
    """

    path: Path
    relative_path: str
    is_dir: bool = False
    root: Path | None = None

    @property
    def relative_pathname(self) -> str:
        if self.is_dir or not self.relative_path:
            return self.relative_path or self.path.name
        return f"{self.relative_path}/{self.path.name}"

    @classmethod
    def detached(cls, path: Path) -> WalkEntry:
        return cls(path=path, relative_path="", is_dir=path.is_dir())


def build_path_matcher(pattern: str) -> NamePredicate:
    """Build a predicate for an exclude pattern tested against a relative pathname.

    ``/body/flags`` is a regular expression, a pattern containing glob
    characters is a glob, anything else is a plain substring.
    """
    if not isinstance(pattern, str) or not pattern.strip():
        raise ConfigurationError(f"Unusable path pattern: {pattern!r}", path=pattern)
    pattern = pattern.strip()
    try:
        compiled = compile_regex_pattern(pattern)
    except re.error as exc:
        raise ConfigurationError(f"Invalid regular expression {pattern!r}: {exc}", path=pattern) from exc
    if compiled is not None:
        return lambda value: compiled.search(value) is not None
    if _GLOB_CHARS.search(pattern):
        return lambda value: fnmatchcase(value, pattern)
    return lambda value: pattern in value


def _as_name_predicate(value: str | NamePredicate) -> NamePredicate:
    if callable(value):
        return value
    return lambda name: fnmatchcase(name, value)


class Finder:
    def __init__(self, *, ignore_vcs: bool = True, ignore_dot_files: bool = True) -> None:
        self._roots: list[Path] = []
        self._excluded_dirs: set[str] = set()
        self._files_only = False
        self._names: list[NamePredicate] = []
        self._not_names: list[NamePredicate] = []
        self._not_paths: list[NamePredicate] = []
        self._appended: list[WalkEntry] = []
        self.ignore_vcs = ignore_vcs
        self.ignore_dot_files = ignore_dot_files

    def in_(self, *directories: Path) -> Finder:
        for directory in directories:
            if not directory.is_dir():
                raise ConfigurationError(f"Walk root is not a directory: {directory}", path=directory)
            self._roots.append(directory)
        return self

    def exclude(self, directories: Iterable[str]) -> Finder:
        """Prune directories given relative to each walk root."""
        self._excluded_dirs.update(item.strip("/") for item in directories if item.strip("/"))
        return self

    def files(self) -> Finder:
        self._files_only = True
        return self

    def name(self, predicate: str | NamePredicate) -> Finder:
        self._names.append(_as_name_predicate(predicate))
        return self

    def not_name(self, predicate: str | NamePredicate) -> Finder:
        self._not_names.append(_as_name_predicate(predicate))
        return self

    def not_path(self, pattern: str) -> Finder:
        self._not_paths.append(build_path_matcher(pattern))
        return self

    def append(self, entries: Iterable[WalkEntry]) -> Finder:
        self._appended.extend(entries)
        return self

    @property
    def roots(self) -> tuple[Path, ...]:
        return tuple(self._roots)

    def __iter__(self) -> Iterator[WalkEntry]:
        seen: set[Path] = set()
        for root in self._roots:
            for entry in self._walk(root):
                if entry.path in seen:
                    continue
                seen.add(entry.path)
                yield entry
        for entry in self._appended:
            if entry.path not in seen:
                seen.add(entry.path)
                yield entry

    def _skip_name(self, name: str) -> bool:
        if self.ignore_vcs and name in VCS_DIRECTORIES:
            return True
        return self.ignore_dot_files and name.startswith(".")

    def _is_excluded_dir(self, relative: str) -> bool:
        return any(relative == item or relative.startswith(f"{item}/") for item in self._excluded_dirs)

    def _accepts(self, entry: WalkEntry) -> bool:
        name = entry.path.name
        if self._names and not any(predicate(name) for predicate in self._names):
            return False
        if any(predicate(name) for predicate in self._not_names):
            return False
        relative = entry.relative_pathname
        return not any(predicate(relative) for predicate in self._not_paths)

    def _walk(self, root: Path) -> Iterator[WalkEntry]:
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            rel_dir = current.relative_to(root).as_posix() if current != root else ""

            kept: list[str] = []
            for name in sorted(dirnames):
                if self._skip_name(name):
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self._is_excluded_dir(rel_path):
                    continue
                kept.append(name)
            dirnames[:] = kept

            if not self._files_only:
                for name in kept:
                    rel_path = f"{rel_dir}/{name}" if rel_dir else name
                    entry = WalkEntry(path=current / name, relative_path=rel_path, is_dir=True, root=root)
                    if self._accepts(entry):
                        yield entry

            for name in sorted(filenames):
                if self._skip_name(name):
                    continue
                path = current / name
                if not path.is_file():
                    continue
                entry = WalkEntry(path=path, relative_path=rel_dir, root=root)
                if self._accepts(entry):
                    yield entry
