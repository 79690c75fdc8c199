"""
Module 04 - Index Documents
File: resolver.py

Purpose: Turn a package name plus selection criteria into one concrete,
platform-specific artifact reference.

Selection:
- explicit version: exact match on the normalized version string
- otherwise: newest by semantic precedence, stable only unless
  prereleases are allowed

Artifact priority for the chosen release:
1. per-platform maps: artifacts, platforms, files, downloads
2. an embedded platform + url pair matching the platform
3. assets list entries tagged with the platform
4. the generic `artifact` field
5. a bare top-level url

The caller downloads and verifies the artifact separately.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from picopak.schemas.errors import NoArtifactError, NotFoundError
from picopak.schemas.index import (
    ARTIFACT_MAP_FIELDS,
    ArtifactRef,
    PackageNode,
    ReleaseEntry,
    ResolvedRelease,
)
from picopak.schemas.manifest import DEFAULT_PLATFORM, normalize_platform
from picopak.semver import normalize_version, sort_versions_desc

from .shapes import find_package

if TYPE_CHECKING:
    from picopak.config.runtime import RuntimeConfig

CMAKE_PLATFORM_PATTERN = re.compile(
    r"""PICO_PLATFORM\s*\)?\s*["']?(rp2040|rp2350)["']?""",
    re.IGNORECASE,
)


def select_release(
    package: PackageNode,
    *,
    version: Optional[str] = None,
    include_prerelease: bool = False,
) -> ReleaseEntry:
    """
    Pick one release of a located package.

    Raises:
        NotFoundError: No releases, requested version absent, or no stable
            release when prereleases are excluded.
    """
    if not package.releases:
        raise NotFoundError(
            f'Package "{package.name}" has no releases in the index',
            details={"package": package.name},
        )

    if version:
        wanted = normalize_version(version)
        for release in package.releases:
            if normalize_version(release.version) == wanted:
                return release
        raise NotFoundError(
            f'Version "{version}" not found for package "{package.name}"',
            details={"package": package.name, "version": version},
        )

    ordered = sort_versions_desc(package.releases, key=lambda r: r.version)
    if include_prerelease:
        return ordered[0]

    for release in ordered:
        if not release.is_prerelease:
            return release
    raise NotFoundError(
        f'No stable release found for package "{package.name}". Use --include-prerelease.',
        details={"package": package.name},
    )


def _pair_ref(release: ReleaseEntry) -> ArtifactRef | None:
    if not release.url:
        return None
    return ArtifactRef(url=release.url, checksum=release.checksum or release.sha256)


def select_artifact(release: ReleaseEntry, platform: str) -> ArtifactRef | None:
    """Apply the artifact priority order; None if nothing yields a URL."""
    for field_name in ARTIFACT_MAP_FIELDS:
        artifact_map = release.artifact_map(field_name)
        if not artifact_map:
            continue
        ref = ArtifactRef.from_value(artifact_map.get(platform))
        if ref is not None:
            return ref

    if release.platform and normalize_platform(release.platform) == platform:
        ref = _pair_ref(release)
        if ref is not None:
            return ref

    for asset in release.assets:
        if isinstance(asset, dict) and normalize_platform(asset.get("platform")) == platform:
            ref = ArtifactRef.from_value(asset)
            if ref is not None:
                return ref

    ref = ArtifactRef.from_value(release.artifact)
    if ref is not None:
        return ref

    return _pair_ref(release)


def resolve_release(
    package_name: str,
    index_document: object,
    *,
    platform: str,
    version: Optional[str] = None,
    include_prerelease: bool = False,
) -> ResolvedRelease:
    """
    Resolve a package against one index document.

    Args:
        package_name: Name to look up (case-insensitive)
        index_document: Parsed index JSON
        platform: Target platform (rp2040 / rp2350)
        version: Explicit version pin, leading 'v' ignored
        include_prerelease: Allow prereleases when picking the latest

    Returns:
        ResolvedRelease with the download URL and optional checksum

    Raises:
        FormatError: Index is not a supported shape
        NotFoundError: Package or version absent
        NoArtifactError: Release has no artifact for the platform
    """
    target = normalize_platform(platform)
    if target is None:
        raise NotFoundError(f"Unsupported platform: {platform}", details={"platform": platform})

    package = find_package(index_document, package_name)
    if package is None:
        raise NotFoundError(
            f'Package "{package_name}" not found in index',
            details={"package": package_name},
        )

    release = select_release(package, version=version, include_prerelease=include_prerelease)
    artifact = select_artifact(release, target)
    if artifact is None:
        raise NoArtifactError(package.name, release.version, target)

    return ResolvedRelease(
        package_name=package.name,
        version=release.version,
        platform=target,
        download_url=artifact.url,
        checksum=artifact.checksum,
    )


def detect_platform(project_dir: str | Path, config: Optional["RuntimeConfig"] = None) -> str:
    """
    Determine the target platform for a project.

    Precedence: configured override (PICO_PLATFORM / --platform), then a
    PICO_PLATFORM mention in the project's CMakeLists.txt, then rp2040.
    """
    if config is not None and config.platform:
        configured = normalize_platform(config.platform)
        if configured:
            return configured

    cmake_path = Path(project_dir) / "CMakeLists.txt"
    if cmake_path.is_file():
        match = CMAKE_PLATFORM_PATTERN.search(cmake_path.read_text(encoding="utf-8", errors="replace"))
        if match:
            detected = normalize_platform(match.group(1))
            if detected:
                return detected

    return DEFAULT_PLATFORM
