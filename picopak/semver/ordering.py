"""
Module 02 - Version Ordering
File: ordering.py

Purpose: Semantic-version precedence used to pick the latest release.

Rules:
- A leading 'v'/'V' and surrounding whitespace are ignored.
- The three numeric core components are compared first; missing or
  non-numeric components count as 0.
- A release with no prerelease tag outranks one with a tag.
- Prerelease identifiers are compared left to right: numeric identifiers
  numerically, numeric below alphanumeric, otherwise lexicographically.
  When every shared identifier is equal the shorter list ranks lower.
- Build metadata ('+...') does not affect precedence.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ParsedVersion:
    """A version split into its comparable parts."""
    core: tuple[int, int, int]
    prerelease: tuple[str, ...] = ()

    @property
    def is_prerelease(self) -> bool:
        return len(self.prerelease) > 0


def normalize_version(value: str) -> str:
    """Trim whitespace and strip a leading 'v'."""
    normalized = value.strip()
    if normalized[:1] in ("v", "V"):
        normalized = normalized[1:]
    return normalized


def is_prerelease_version(value: str) -> bool:
    """A version string with a '-' suffix is a prerelease."""
    return "-" in normalize_version(value)


def _core_part(part: str) -> int:
    return int(part) if part.isdigit() else 0


def parse_version(value: str) -> ParsedVersion:
    normalized = normalize_version(value).split("+", 1)[0]
    core_text, _, prerelease_text = normalized.partition("-")

    parts = [_core_part(p) for p in core_text.split(".")][:3]
    while len(parts) < 3:
        parts.append(0)

    prerelease = tuple(prerelease_text.split(".")) if prerelease_text else ()
    return ParsedVersion(core=(parts[0], parts[1], parts[2]), prerelease=prerelease)


def _compare_identifiers(a: str, b: str) -> int:
    a_num = a.isdigit()
    b_num = b.isdigit()
    if a_num and b_num:
        return (int(a) > int(b)) - (int(a) < int(b))
    if a_num != b_num:
        return -1 if a_num else 1
    return (a > b) - (a < b)


def compare_versions(a: str, b: str) -> int:
    """
    Compare two version strings by semantic precedence.

    Returns:
        Negative if a < b, zero if equal, positive if a > b.
    """
    parsed_a = parse_version(a)
    parsed_b = parse_version(b)

    if parsed_a.core != parsed_b.core:
        return 1 if parsed_a.core > parsed_b.core else -1

    if not parsed_a.is_prerelease and parsed_b.is_prerelease:
        return 1
    if parsed_a.is_prerelease and not parsed_b.is_prerelease:
        return -1

    for a_part, b_part in zip(parsed_a.prerelease, parsed_b.prerelease):
        result = _compare_identifiers(a_part, b_part)
        if result:
            return result

    return (len(parsed_a.prerelease) > len(parsed_b.prerelease)) - (
        len(parsed_a.prerelease) < len(parsed_b.prerelease)
    )


version_sort_key = functools.cmp_to_key(compare_versions)


def sort_versions_desc(items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Sort items newest first by the version string `key` returns."""
    return sorted(items, key=lambda item: version_sort_key(key(item)), reverse=True)


def versions_equal(a: str, b: str) -> bool:
    """Exact match after normalization (used for explicit pins and dedupe)."""
    return normalize_version(a) == normalize_version(b)


__all__ = [
    "ParsedVersion",
    "normalize_version",
    "is_prerelease_version",
    "parse_version",
    "compare_versions",
    "version_sort_key",
    "sort_versions_desc",
    "versions_equal",
]
