from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from jsonschema import Draft7Validator


@dataclass(slots=True)
class ValidationIssue:
    """Represents a single validation problem."""

    severity: str
    path: str
    message: str
    code: str
    fix_suggestion: Optional[str] = None


@dataclass(slots=True)
class ValidationReport:
    """Aggregates validation warnings and errors."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


_STRING_LIST = {
    "oneOf": [
        {"type": "array", "items": {"type": "string"}},
        {"type": "string"},
    ]
}

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "source": {"type": "string"},
        "destination": {"type": "string"},
        "posts": {"type": "string"},
        "layouts": {"type": "string"},
        "includes": {"type": "string"},
        "plugins": {"type": "string"},
        "markdown_ext": _STRING_LIST,
        "processable_ext": _STRING_LIST,
        "include": _STRING_LIST,
        "exclude": _STRING_LIST,
    },
    "additionalProperties": True,
}

# Patterns written as /.../ are regular expressions, matching the finder.
REGEX_PATTERN = re.compile(r"^/(?P<body>.+)/(?P<flags>[imsx]*)$")

_LIST_KEYS = ("markdown_ext", "processable_ext", "include", "exclude")


def _suggest_schema_fix(path: str, message: str, code: str) -> Optional[str]:
    if path in _LIST_KEYS:
        return f"Provide '{path}' as a YAML list of strings, e.g. {path}: [a, b]"
    if path.split("[")[0] in _LIST_KEYS:
        return "List entries must be plain strings"
    if "is not of type 'string'" in message:
        return f"Quote the value of '{path}' so it is read as a path string"
    return None


def _suggest_entry_fix(path: str, message: str, code: str) -> Optional[str]:
    return "Remove the blank entry or give it a path relative to the source directory"


def _suggest_regex_fix(path: str, message: str, code: str) -> Optional[str]:
    return "Escape special characters or drop the surrounding slashes to match a plain substring"


FIX_SUGGESTION_REGISTRY: Dict[str, Callable[[str, str, str], Optional[str]]] = {
    "schema": _suggest_schema_fix,
    "blank-entry": _suggest_entry_fix,
    "invalid-regex": _suggest_regex_fix,
}


def get_fix_suggestion(issue: ValidationIssue) -> Optional[str]:
    handler = FIX_SUGGESTION_REGISTRY.get(issue.code)
    if handler is None:
        return None
    return handler(issue.path, issue.message, issue.code)


def _format_jsonschema_path(path: Sequence[Any]) -> str:
    if not path:
        return "<root>"
    tokens: List[str] = []
    for part in path:
        if isinstance(part, int):
            if tokens:
                tokens[-1] = f"{tokens[-1]}[{part}]"
            else:
                tokens.append(f"[{part}]")
        else:
            tokens.append(str(part))
    return ".".join(tokens) if tokens else "<root>"


def _add_error(report: ValidationReport, path: str, message: str, code: str) -> None:
    issue = ValidationIssue(severity="error", path=path, message=message, code=code)
    issue.fix_suggestion = get_fix_suggestion(issue)
    report.errors.append(issue)


def compile_regex_pattern(pattern: str) -> Optional[re.Pattern[str]]:
    """Compile a ``/body/flags`` pattern; return ``None`` for non-regex patterns.

    Raises ``re.error`` when the body is not a valid expression.
    """
    match = REGEX_PATTERN.match(pattern)
    if match is None:
        return None
    flags = 0
    for letter in match.group("flags"):
        flags |= {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}[letter]
    return re.compile(match.group("body"), flags)


def validate_config_data(data: Dict[str, Any]) -> ValidationReport:
    """Validate configuration data against schema and semantic rules."""
    report = ValidationReport()
    if not isinstance(data, dict):
        _add_error(report, "<root>", "Configuration must be a mapping", "schema")
        return report

    validator = Draft7Validator(CONFIG_SCHEMA)
    for error in sorted(validator.iter_errors(data), key=lambda exc: _format_jsonschema_path(exc.absolute_path)):
        _add_error(report, _format_jsonschema_path(error.absolute_path), error.message, "schema")

    _validate_semantics(data, report)
    return report


def _validate_semantics(data: Dict[str, Any], report: ValidationReport) -> None:
    for key in ("include", "exclude"):
        entries = data.get(key)
        if isinstance(entries, str):
            entries = [entries]
        if not isinstance(entries, list):
            continue
        for index, entry in enumerate(entries):
            if not isinstance(entry, str):
                continue
            path = f"{key}[{index}]"
            if not entry.strip():
                _add_error(report, path, f"'{key}' entries must not be blank", "blank-entry")
                continue
            if key == "exclude":
                try:
                    compile_regex_pattern(entry.strip())
                except re.error as exc:
                    _add_error(report, path, f"Invalid regular expression {entry!r}: {exc}", "invalid-regex")

    for key in ("markdown_ext", "processable_ext"):
        entries = data.get(key)
        if isinstance(entries, list) and not entries:
            report.warnings.append(
                ValidationIssue(
                    severity="warning",
                    path=key,
                    message=f"'{key}' is empty; matching content will not be discovered",
                    code="empty-extensions",
                )
            )


def group_validation_issues(report: ValidationReport) -> Dict[str, List[ValidationIssue]]:
    """Group issues by their top-level configuration key."""
    grouped: Dict[str, List[ValidationIssue]] = {}
    for issue in [*report.errors, *report.warnings]:
        section = issue.path.split(".")[0].split("[")[0] or "<root>"
        grouped.setdefault(section, []).append(issue)
    return grouped
