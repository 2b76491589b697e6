from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigurationError
from .utils import load_yaml_file
from .validation import ValidationReport, validate_config_data

CONFIG_FILENAME = "config.yml"

DEFAULT_MARKDOWN_EXT: tuple[str, ...] = ("markdown", "mkd", "mkdn", "md")
DEFAULT_PROCESSABLE_EXT: tuple[str, ...] = ("html", "htm", "xml", "twig")


@dataclass(frozen=True)
class SiteConfig:
    """Read-only configuration snapshot for a single build.

    Directory values may be relative; they are anchored to ``source`` (which
    is itself anchored to the directory holding the configuration file).
    """

    source: Path
    destination: str = "_site"
    posts: str = "_posts"
    layouts: str = "_layouts"
    includes: str = "_includes"
    plugins: str = "_plugins"
    markdown_ext: tuple[str, ...] = DEFAULT_MARKDOWN_EXT
    processable_ext: tuple[str, ...] = DEFAULT_PROCESSABLE_EXT
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    config_filename: str = CONFIG_FILENAME
    extra: Mapping[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        if key in _FIELD_NAMES and key != "extra":
            return getattr(self, key)
        return self.extra.get(key, default)


_FIELD_NAMES = frozenset(item.name for item in fields(SiteConfig))


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    return tuple(str(item).strip() for item in value)


def _coerce_values(values: Mapping[str, Any]) -> dict[str, Any]:
    coerced: dict[str, Any] = {}
    for key, value in values.items():
        if key in {"markdown_ext", "processable_ext", "include", "exclude"}:
            coerced[key] = _as_tuple(value)
        elif key == "source":
            coerced[key] = Path(value).expanduser()
        elif key in _FIELD_NAMES:
            coerced[key] = str(value)
    return coerced


def _raise_for_report(report: ValidationReport, origin: object) -> None:
    if report.is_valid:
        return
    details = "; ".join(f"{issue.path}: {issue.message}" for issue in report.errors)
    raise ConfigurationError(f"Invalid configuration in {origin}: {details}", path=origin)


def build_config(data: Mapping[str, Any], *, base_dir: Path, config_filename: str = CONFIG_FILENAME) -> SiteConfig:
    """Build a :class:`SiteConfig` from raw mapping data.

    ``base_dir`` anchors a relative ``source`` value.
    """
    report = validate_config_data(dict(data))
    _raise_for_report(report, base_dir / config_filename)

    known = {key: value for key, value in data.items() if key in _FIELD_NAMES and key != "extra"}
    extra = {key: value for key, value in data.items() if key not in _FIELD_NAMES}

    values = _coerce_values(known)
    source = values.pop("source", Path("."))
    if not source.is_absolute():
        source = base_dir / source
    values.setdefault("config_filename", config_filename)

    return SiteConfig(source=source, extra=extra, **values)


def load_config(path: Path, overrides: Mapping[str, Any] | None = None) -> SiteConfig:
    """Load ``config.yml`` (or the file at ``path``) into a :class:`SiteConfig`.

    ``path`` may be the configuration file or the site directory. A missing
    file yields the defaults rooted at that directory.
    """
    path = path.expanduser()
    if path.is_dir():
        config_file = path / CONFIG_FILENAME
    else:
        config_file = path

    data: dict[str, Any] = {}
    if config_file.exists():
        try:
            loaded = load_yaml_file(config_file)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Failed to parse {config_file}: {exc}", path=config_file) from exc
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"{config_file} must contain a mapping at the root", path=config_file)
        data = loaded

    if overrides:
        data = {**data, **{key: value for key, value in overrides.items() if value is not None}}

    return build_config(data, base_dir=config_file.parent.resolve(), config_filename=config_file.name)
