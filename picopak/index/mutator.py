"""
Module 04 - Index Documents
File: mutator.py

Purpose: Add a release to an index document without touching existing
releases.

Publishing is strictly additive: a (package, version) pair that already
exists is a ConflictError, and no prior entry is ever edited or removed.
The input document is never mutated; a deep copy is returned in the
same shape it arrived in.
"""

from __future__ import annotations

import copy
from typing import Any

from picopak.schemas.errors import ConflictError, FormatError
from picopak.semver import normalize_version

from .shapes import (
    IndexShape,
    ReleasesShape,
    detect_releases_shape,
    existing_releases,
    package_collection,
    require_root,
)


def _version_key(value: Any) -> str:
    return normalize_version(str(value or "")).lower()


def _append_release(
    releases: list[Any],
    package_name: str,
    version: str,
    payload: dict[str, Any],
) -> None:
    wanted = _version_key(version)
    for entry in releases:
        if isinstance(entry, dict) and _version_key(entry.get("version")) == wanted:
            raise ConflictError(package_name, version)
    releases.append(payload)


def _insert_release(
    releases: dict[str, Any],
    package_name: str,
    version: str,
    payload: dict[str, Any],
) -> None:
    wanted = _version_key(version)
    for key, entry in releases.items():
        entry_version = entry.get("version") if isinstance(entry, dict) else None
        if _version_key(key) == wanted or _version_key(entry_version) == wanted:
            raise ConflictError(package_name, version)
    releases[version] = payload


def _holds_entries(container: dict[str, Any]) -> bool:
    """True when a legacy map already carries object-valued entries."""
    return any(isinstance(value, dict) for value in container.values())


def _apply_to_array(
    packages: list[Any],
    package_name: str,
    version: str,
    payload: dict[str, Any],
) -> None:
    wanted = package_name.lower()
    node = next(
        (
            entry for entry in packages
            if isinstance(entry, dict)
            and isinstance(entry.get("name"), str)
            and entry["name"].lower() == wanted
        ),
        None,
    )
    if node is None:
        node = {"name": package_name, "releases": []}
        packages.append(node)

    releases = existing_releases(node, IndexShape.ARRAY)
    if releases is None:
        releases = node["releases"] = []
    if not isinstance(releases, list):
        raise FormatError(
            f'Unsupported releases format for package "{package_name}" (expected array).'
        )
    _append_release(releases, package_name, version, payload)


def _apply_to_map(
    packages: dict[str, Any],
    package_name: str,
    version: str,
    payload: dict[str, Any],
) -> None:
    node = packages.get(package_name)
    if node is None:
        node = {"name": package_name, "releases": {}}
        packages[package_name] = node
    if not isinstance(node, dict):
        raise FormatError(f'Unsupported package entry format for "{package_name}".')

    releases = existing_releases(node, IndexShape.MAP)
    if releases is node and not _holds_entries(node):
        releases = node["releases"] = {}

    if not node.get("name"):
        node["name"] = package_name
    if not node.get("description") and payload.get("description"):
        node["description"] = payload["description"]

    if detect_releases_shape(releases, package_name) is ReleasesShape.ARRAY:
        _append_release(releases, package_name, version, payload)
    else:
        _insert_release(releases, package_name, version, payload)


def apply_release(
    index_document: Any,
    package_name: str,
    version: str,
    release_payload: dict[str, Any],
) -> dict[str, Any]:
    """
    Return a copy of the index with one new release added.

    The release lands in the container a reader of the document sees,
    legacy layouts included, so the duplicate check covers every
    published version.

    Args:
        index_document: Parsed index JSON (left untouched)
        package_name: Package to publish under
        version: Version being published
        release_payload: Release entry to insert

    Returns:
        The updated index document

    Raises:
        FormatError: Root, packages or releases of an unsupported type
        ConflictError: (package, version) already present
    """
    root = copy.deepcopy(require_root(index_document))
    payload = copy.deepcopy(release_payload)

    if root.get("packages") is None and not _holds_entries(root):
        root["packages"] = {}

    shape, packages = package_collection(root)
    if shape is IndexShape.ARRAY:
        _apply_to_array(packages, package_name, version, payload)
    else:
        _apply_to_map(packages, package_name, version, payload)
    return root
