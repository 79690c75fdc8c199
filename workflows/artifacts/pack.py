"""
Module 05 - Artifact Packaging & IO
File: pack.py

Purpose: Build a distributable .picopak archive from a package directory
and emit its metadata sidecar.

Steps:
1. require picopak.json and include/
2. validate the manifest and the tier content
3. require cmake/<name>.cmake
4. zip the directory's top-level entries into <name>-<version>.picopak
5. write <archive>.metadata.json
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from picopak.crypto.hashing import sha256_file
from picopak.manifest import check_tier_content, validate_manifest
from picopak.schemas.errors import ContentValidationError, NotFoundError
from picopak.schemas.manifest import Manifest
from picopak.schemas.metadata import ArtifactDescriptor, PackMetadata

from .archive import archive_name, create_archive
from .io import read_json_file, write_json_file

logger = logging.getLogger(__name__)

MANIFEST_FILE = "picopak.json"
INCLUDE_DIR = "include"
CMAKE_DIR = "cmake"
METADATA_SUFFIX = ".metadata.json"


@dataclass
class PackResult:
    """Outcome of packing one directory."""
    manifest: Manifest
    archive_path: Path
    metadata_path: Path
    metadata: PackMetadata
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.manifest.name,
            "version": self.manifest.version,
            "archive_path": str(self.archive_path),
            "metadata_path": str(self.metadata_path),
            "sha256": self.metadata.artifact.sha256,
            "size_bytes": self.metadata.artifact.size_bytes,
            "warnings": list(self.warnings),
        }


def metadata_path_for(archive_path: str | Path) -> Path:
    """Sidecar path for an archive: <archive>.metadata.json."""
    path = Path(archive_path)
    return path.with_name(path.name + METADATA_SUFFIX)


def describe_artifact(archive_path: Path) -> ArtifactDescriptor:
    """Hash and size a produced archive."""
    return ArtifactDescriptor(
        file_name=archive_path.name,
        file_path=str(archive_path),
        sha256=sha256_file(archive_path),
        size_bytes=archive_path.stat().st_size,
    )


def pack_directory(source_dir: str | Path, output_dir: Optional[str | Path] = None) -> PackResult:
    """
    Validate and package a directory.

    Args:
        source_dir: Package root containing picopak.json
        output_dir: Where to write the archive (default: the parent of
            source_dir)

    Returns:
        PackResult with archive/sidecar paths and every warning raised

    Raises:
        NotFoundError: source_dir missing
        FormatError: picopak.json is not valid JSON
        ManifestValidationError: Manifest violations
        ContentValidationError / IntegrityError: Tier content violations
    """
    src = Path(source_dir).resolve()
    if not src.is_dir():
        raise NotFoundError(f"Source directory not found: {source_dir}")

    manifest_path = src / MANIFEST_FILE
    if not manifest_path.is_file():
        raise ContentValidationError([f"{MANIFEST_FILE} not found in source directory"])
    if not (src / INCLUDE_DIR).is_dir():
        raise ContentValidationError([f"Required {INCLUDE_DIR}/ directory not found"])

    result = validate_manifest(read_json_file(manifest_path, what=MANIFEST_FILE))
    manifest = result.manifest
    warnings = list(result.warnings)
    warnings.extend(check_tier_content(src, manifest))
    for warning in warnings:
        logger.warning(warning)

    cmake_file = src / CMAKE_DIR / f"{manifest.name}.cmake"
    if not cmake_file.is_file():
        raise ContentValidationError([f"Required CMake file not found: {CMAKE_DIR}/{manifest.name}.cmake"])

    out_dir = Path(output_dir).resolve() if output_dir else src.parent
    archive_path = create_archive(src, out_dir / archive_name(manifest.name, manifest.version))
    logger.info("Archive built: %s", archive_path)

    metadata = PackMetadata.from_manifest(manifest, describe_artifact(archive_path))
    metadata_path = write_json_file(metadata_path_for(archive_path), metadata)
    logger.info("Metadata written: %s", metadata_path)

    return PackResult(
        manifest=manifest,
        archive_path=archive_path,
        metadata_path=metadata_path,
        metadata=metadata,
        warnings=warnings,
    )
