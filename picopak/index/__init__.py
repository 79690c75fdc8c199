"""
Module 04 - Index Documents

Reading, resolving against, and publishing into release index documents.
"""

from .shapes import (
    IndexShape,
    ReleasesShape,
    detect_index_shape,
    detect_releases_shape,
    find_package,
    list_package_nodes,
    normalize_releases,
)
from .resolver import detect_platform, resolve_release, select_artifact, select_release
from .mutator import apply_release
from .service import (
    SEARCH_RESULT_LIMIT,
    IndexPackageSummary,
    fetch_index,
    fetch_index_document,
    list_index_packages,
    resolve_from_candidates,
    search_index,
)

__all__ = [
    # Shapes
    "IndexShape",
    "ReleasesShape",
    "detect_index_shape",
    "detect_releases_shape",
    "find_package",
    "list_package_nodes",
    "normalize_releases",
    # Resolution
    "detect_platform",
    "resolve_release",
    "select_artifact",
    "select_release",
    # Publishing
    "apply_release",
    # Service
    "SEARCH_RESULT_LIMIT",
    "IndexPackageSummary",
    "fetch_index",
    "fetch_index_document",
    "list_index_packages",
    "resolve_from_candidates",
    "search_index",
]
