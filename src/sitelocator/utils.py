from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Any, Dict

import yaml


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: expand_env(val) for key, val in value.items()}
    return value


def load_yaml_file(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return expand_env(data)


def write_bytes(destination: Path, content: bytes) -> None:
    """Write ``content`` to ``destination``, creating parent directories."""
    ensure_directory(destination.parent)
    destination.write_bytes(content)


def copy_file(source: Path, destination: Path) -> None:
    """Copy ``source`` byte-for-byte to ``destination``, replacing any existing file.

    Permission bits are not copied, so a read-only source can be copied again.
    """
    ensure_directory(destination.parent)
    shutil.copyfile(source, destination)


def remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
