"""
Module 06 - Install Workflow
File: install.py

Purpose: Install a .picopak archive (local file or resolved by name from
the index) into a project's libs/ directory, and list/remove installed
packages.

Install is all-or-nothing: the archive is extracted into a scoped temp
directory, staged under libs/<name>.new, verified, and only then swapped
in for any previous install, which is kept as libs/<name>.old until
the new tree is in place.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from picopak.config.runtime import RuntimeConfig
from picopak.http.client import HttpClient
from picopak.index.resolver import detect_platform
from picopak.index.service import resolve_from_candidates
from picopak.manifest import validate_install_metadata
from picopak.schemas.errors import ContentValidationError, NotFoundError, PicopakException
from picopak.schemas.index import ResolvedRelease
from picopak.schemas.manifest import InstallMetadata

from workflows.artifacts.archive import ARCHIVE_SUFFIX, extract_archive
from workflows.artifacts.io import read_json_file
from workflows.artifacts.pack import CMAKE_DIR, MANIFEST_FILE
from workflows.artifacts.transfer import fetch_and_verify

logger = logging.getLogger(__name__)

LIBS_DIR = "libs"
STAGING_SUFFIX = ".new"
BACKUP_SUFFIX = ".old"


@dataclass
class InstallResult:
    """Outcome of an install (or a --list inspection)."""
    metadata: InstallMetadata
    files: list[str] = field(default_factory=list)
    install_dir: Optional[Path] = None
    resolved: Optional[ResolvedRelease] = None
    replaced_existing: bool = False
    has_cmakelists: bool = True

    @property
    def listed_only(self) -> bool:
        return self.install_dir is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.metadata.model_dump(mode="json"),
            "files": list(self.files),
            "install_dir": str(self.install_dir) if self.install_dir else None,
            "resolved": self.resolved.model_dump(mode="json") if self.resolved else None,
            "replaced_existing": self.replaced_existing,
        }


@dataclass
class InstalledPackage:
    """A package found under libs/."""
    name: str
    version: Optional[str]
    path: Path

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version, "path": str(self.path)}


def is_package_name_reference(value: str) -> bool:
    """
    True when value names a package rather than a local archive path.

    A name is not an existing path, does not end in .picopak and contains
    no path separators or drive colons.
    """
    if not value or Path(value).exists():
        return False
    if value.endswith(ARCHIVE_SUFFIX):
        return False
    return not any(sep in value for sep in ("\\", "/", ":"))


def is_safe_dir_name(name: str) -> bool:
    """A package name usable as a single directory under libs/."""
    return bool(name) and name not in (".", "..") and not any(sep in name for sep in ("/", "\\"))


def _relative_files(root: Path) -> list[str]:
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


def _install_tree(extracted: Path, metadata: InstallMetadata, project_dir: Path) -> tuple[Path, bool]:
    if not is_safe_dir_name(metadata.name):
        raise ContentValidationError([f"Package name cannot be used as a directory: {metadata.name!r}"])
    libs_dir = project_dir / LIBS_DIR
    libs_dir.mkdir(parents=True, exist_ok=True)

    target = libs_dir / metadata.name
    staging = libs_dir / f"{metadata.name}{STAGING_SUFFIX}"
    backup = libs_dir / f"{metadata.name}{BACKUP_SUFFIX}"
    for leftover in (staging, backup):
        if leftover.exists():
            shutil.rmtree(leftover)

    try:
        shutil.copytree(extracted, staging)
        cmake_file = staging / CMAKE_DIR / f"{metadata.name}.cmake"
        if not cmake_file.is_file():
            raise ContentValidationError([
                f"Installation verification failed: {CMAKE_DIR}/{metadata.name}.cmake not found in package"
            ])

        replaced = target.exists()
        if replaced:
            logger.info("%s is already installed; replacing", metadata.name)
            target.rename(backup)
        try:
            staging.rename(target)
        except OSError:
            if replaced:
                backup.rename(target)
            raise
    finally:
        if staging.exists():
            shutil.rmtree(staging)

    # The previous install is only discarded once the new one is in place.
    if replaced:
        shutil.rmtree(backup)
    return target, replaced


def _install_from_archive(
    archive_path: Path,
    project_dir: Path,
    *,
    list_only: bool,
) -> InstallResult:
    with tempfile.TemporaryDirectory(prefix="picopak_") as tmpdir:
        extracted = extract_archive(archive_path, Path(tmpdir) / "package")
        manifest_path = extracted / MANIFEST_FILE
        if not manifest_path.is_file():
            raise ContentValidationError([f"Invalid package - {MANIFEST_FILE} not found"])
        metadata = validate_install_metadata(read_json_file(manifest_path, what=MANIFEST_FILE))
        files = _relative_files(extracted)

        if list_only:
            return InstallResult(metadata=metadata, files=files)

        if not project_dir.is_dir():
            raise NotFoundError(f"Project directory does not exist: {project_dir}")
        has_cmakelists = (project_dir / "CMakeLists.txt").is_file()
        if not has_cmakelists:
            logger.warning("CMakeLists.txt not found in project directory; continuing")

        install_dir, replaced = _install_tree(extracted, metadata, project_dir)
        logger.info("Installed %s %s to %s", metadata.name, metadata.version, install_dir)
        return InstallResult(
            metadata=metadata,
            files=files,
            install_dir=install_dir,
            replaced_existing=replaced,
            has_cmakelists=has_cmakelists,
        )


def install_package(
    reference: str,
    config: RuntimeConfig,
    *,
    project_dir: str | Path = ".",
    version: Optional[str] = None,
    include_prerelease: bool = False,
    platform: Optional[str] = None,
    list_only: bool = False,
    client: Optional[HttpClient] = None,
) -> InstallResult:
    """
    Install a package by name or from a local .picopak file.

    Args:
        reference: Package name or archive path
        config: Runtime configuration (index URLs, platform override)
        project_dir: Project root receiving libs/<name>
        version: Version pin (names only)
        include_prerelease: Allow prereleases when picking latest (names only)
        platform: Explicit platform; otherwise detected from the project
        list_only: Only list archive contents
        client: HTTP client; one is created from config if omitted

    Raises:
        NotFoundError, NoArtifactError, TransportError, IntegrityError,
        ManifestValidationError, ContentValidationError, FormatError
    """
    project = Path(project_dir)

    if not is_package_name_reference(reference):
        archive = Path(reference)
        if not archive.is_file():
            raise NotFoundError(f"Package file not found: {reference}")
        if archive.suffix != ARCHIVE_SUFFIX:
            raise ContentValidationError([f"Invalid package file (must be {ARCHIVE_SUFFIX}): {reference}"])
        return _install_from_archive(archive, project, list_only=list_only)

    target_platform = platform or detect_platform(project, config)
    owns_client = client is None
    http = client or HttpClient(
        timeout=config.http.timeout,
        max_redirects=config.http.max_redirects,
        default_headers={"User-Agent": config.http.user_agent},
    )
    try:
        resolved = resolve_from_candidates(
            reference,
            config,
            http,
            platform=target_platform,
            version=version,
            include_prerelease=include_prerelease,
        )
        with tempfile.TemporaryDirectory(prefix="picopak_dl_") as tmpdir:
            download_path = Path(tmpdir) / (
                f"{resolved.package_name}_{resolved.version}_{resolved.platform}{ARCHIVE_SUFFIX}"
            )
            fetch_and_verify(resolved.download_url, download_path, resolved.checksum, client=http)
            result = _install_from_archive(download_path, project, list_only=list_only)
    finally:
        if owns_client:
            http.close()

    result.resolved = resolved
    return result


def list_installed(project_dir: str | Path = ".") -> list[InstalledPackage]:
    """
    Packages installed under libs/, sorted by directory name.

    A package whose picopak.json is missing or unreadable is still listed,
    under its directory name with an unknown version.
    """
    libs_dir = Path(project_dir) / LIBS_DIR
    if not libs_dir.is_dir():
        return []

    installed: list[InstalledPackage] = []
    for entry in sorted(p for p in libs_dir.iterdir() if p.is_dir()):
        if entry.name.endswith(STAGING_SUFFIX):
            continue
        name, version = entry.name, None
        manifest_path = entry / MANIFEST_FILE
        if manifest_path.is_file():
            try:
                data = read_json_file(manifest_path, what=MANIFEST_FILE)
            except PicopakException as e:
                logger.warning("Unreadable %s in %s: %s", MANIFEST_FILE, entry, e.message)
                data = None
            if isinstance(data, dict):
                if isinstance(data.get("name"), str) and data["name"].strip():
                    name = data["name"].strip()
                if isinstance(data.get("version"), str) and data["version"].strip():
                    version = data["version"].strip()
        installed.append(InstalledPackage(name=name, version=version, path=entry))
    return installed


def remove_installed(package_name: str, project_dir: str | Path = ".") -> Path:
    """
    Delete libs/<name>.

    Raises:
        NotFoundError: The package is not installed
    """
    libs_dir = Path(project_dir) / LIBS_DIR
    if not is_safe_dir_name(package_name):
        raise NotFoundError(f"Invalid package name: {package_name!r}")
    target = libs_dir / package_name
    if not target.is_dir():
        raise NotFoundError(f'Package "{package_name}" is not installed in {libs_dir}')
    shutil.rmtree(target)
    logger.info("Removed %s", target)
    return target
