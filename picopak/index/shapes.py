"""
Module 04 - Index Documents
File: shapes.py

Purpose: Detect and normalize the supported index document shapes.

An index root is a JSON object whose `packages` member is either

    ARRAY:  [{"name": "FastLED", "releases": [...]}, ...]
    MAP:    {"FastLED": {"name": "FastLED", "releases": [...] | {...}}, ...}

and a package's `releases` is either an array of release objects or a
map keyed by version string. Reads normalize everything into an ordered
list of ReleaseEntry; writes dispatch on the detected tags so the
original shape is preserved.

Legacy layouts: the `versions` key, a map-shaped package node that is
itself the releases map, and a root with no `packages` member that is
itself the package map. Writes go into whichever container a read sees.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterator

from picopak.schemas.errors import FormatError
from picopak.schemas.index import PackageNode, ReleaseEntry

logger = logging.getLogger(__name__)


class IndexShape(str, Enum):
    """How the `packages` collection is laid out."""
    ARRAY = "array"
    MAP = "map"


class ReleasesShape(str, Enum):
    """How a package's releases are laid out."""
    ARRAY = "array"
    MAP = "map"


def require_root(document: Any) -> dict[str, Any]:
    """The index root must be a JSON object."""
    if not isinstance(document, dict):
        raise FormatError("Index root must be a JSON object.")
    return document


def detect_index_shape(packages: Any) -> IndexShape:
    """
    Tag a `packages` collection.

    Raises:
        FormatError: If it is neither an array nor an object.
    """
    if isinstance(packages, list):
        return IndexShape.ARRAY
    if isinstance(packages, dict):
        return IndexShape.MAP
    raise FormatError('Unsupported index "packages" format.')


def detect_releases_shape(releases: Any, package_name: str) -> ReleasesShape:
    """
    Tag a package's `releases` member.

    Raises:
        FormatError: If it is neither an array nor an object.
    """
    if isinstance(releases, list):
        return ReleasesShape.ARRAY
    if isinstance(releases, dict):
        return ReleasesShape.MAP
    raise FormatError(f'Unsupported releases format for package "{package_name}".')


def package_collection(document: Any) -> tuple[IndexShape, Any]:
    """Locate the package collection for reading (root fallback included)."""
    root = require_root(document)
    packages = root.get("packages")
    if packages is None:
        packages = root
    return detect_index_shape(packages), packages


def _stored_name(key: str, node: dict[str, Any]) -> str:
    name = node.get("name")
    return name if isinstance(name, str) and name else key


def iter_package_nodes(document: Any) -> Iterator[tuple[str, dict[str, Any], IndexShape]]:
    """
    Yield (key, node, shape) for every usable package node.

    For the array shape the key is the node's `name` (entries without a
    string name are skipped); for the map shape it is the map key.
    Non-object nodes are skipped.
    """
    shape, packages = package_collection(document)
    if shape is IndexShape.ARRAY:
        for node in packages:
            if isinstance(node, dict) and isinstance(node.get("name"), str) and node["name"]:
                yield node["name"], node, shape
        return

    for key, node in packages.items():
        if isinstance(node, dict):
            yield key, node, shape


def existing_releases(node: dict[str, Any], shape: IndexShape) -> Any:
    """
    The releases container a reader sees for a package node.

    `releases` first, then the legacy `versions` key; a map-shaped node
    with neither is itself the version-keyed releases map. None when an
    array-shaped node has no releases yet.
    """
    if node.get("releases") is not None:
        return node["releases"]
    if node.get("versions") is not None:
        return node["versions"]
    if shape is IndexShape.MAP:
        return node
    return None


def normalize_releases(raw: Any, package_name: str) -> list[ReleaseEntry]:
    """
    Normalize an array- or map-shaped releases member into entries.

    Array entries without a string `version` are skipped; map entries take
    their version from the payload or, failing that, the key.

    Raises:
        FormatError: If releases is neither an array nor an object.
    """
    if raw is None:
        return []
    shape = detect_releases_shape(raw, package_name)
    if shape is ReleasesShape.ARRAY:
        entries = (ReleaseEntry.from_node(item) for item in raw)
    else:
        entries = (ReleaseEntry.from_node(value, version_key=key) for key, value in raw.items())
    return [entry for entry in entries if entry is not None]


def _to_package_node(key: str, node: dict[str, Any], shape: IndexShape) -> PackageNode:
    name = _stored_name(key, node)
    description = node.get("description")
    return PackageNode(
        name=name,
        description=description if isinstance(description, str) else None,
        releases=normalize_releases(existing_releases(node, shape), name),
    )


def find_package(document: Any, package_name: str) -> PackageNode | None:
    """
    Locate a package by case-insensitive name across both shapes.

    Map-shaped indexes match on the key. The first match in document
    order wins, so packages differing only by case resolve to the first.
    """
    wanted = package_name.strip().lower()
    for key, node, shape in iter_package_nodes(document):
        if key.lower() == wanted:
            return _to_package_node(key, node, shape)
    return None


def list_package_nodes(document: Any) -> list[PackageNode]:
    """
    Every package in the index with releases normalized.

    Packages whose releases have an unsupported type are skipped with a
    warning so one bad entry does not hide the rest of the catalog.
    """
    result: list[PackageNode] = []
    for key, node, shape in iter_package_nodes(document):
        try:
            result.append(_to_package_node(key, node, shape))
        except FormatError as e:
            logger.warning("Skipping index entry %s: %s", key, e.message)
    return result
