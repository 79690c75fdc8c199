"""
Semantic-version ordering shared by the resolver, index service and mutator.
"""
from .ordering import (
    ParsedVersion,
    normalize_version,
    is_prerelease_version,
    parse_version,
    compare_versions,
    version_sort_key,
    sort_versions_desc,
    versions_equal,
)

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
