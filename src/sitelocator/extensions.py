"""Filename extension predicates."""

from __future__ import annotations

from collections.abc import Callable, Iterable


def _normalize(extensions: Iterable[str]) -> tuple[str, ...]:
    cleaned: list[str] = []
    for ext in extensions:
        value = str(ext).strip().lstrip(".")
        if value and value not in cleaned:
            cleaned.append(value)
    return tuple(cleaned)


def combine_extensions(*groups: Iterable[str]) -> tuple[str, ...]:
    """Return the order-preserving union of several extension lists."""
    merged: list[str] = []
    for group in groups:
        merged.extend(group)
    return _normalize(merged)


def build_matcher(extensions: Iterable[str]) -> Callable[[str], bool]:
    """Build a case-sensitive predicate testing whether a filename ends in ``.ext``.

    Multi-part extensions such as ``twig.html`` are supported. An empty set
    yields a predicate that never matches.
    """
    suffixes = tuple(f".{ext}" for ext in _normalize(extensions))
    if not suffixes:
        return lambda name: False

    def matches(name: str) -> bool:
        return name.endswith(suffixes)

    return matches

