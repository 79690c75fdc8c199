"""
Module 03 - Manifest Validation
File: content.py

Purpose: Check a package tree against its declared distribution tier.

- Declared binaries must stay inside the package root, exist, and hash
  to the manifest's sha256.
- binary-only packages must not contain implementation sources.
- source packages should carry headers or sources under include/
  (a warning when they don't).
"""

from __future__ import annotations

import logging
from pathlib import Path

from picopak.crypto.hashing import sha256_file
from picopak.schemas.errors import ContentValidationError, IntegrityError
from picopak.schemas.manifest import Manifest

logger = logging.getLogger(__name__)

IMPLEMENTATION_EXTENSIONS: frozenset[str] = frozenset({".c", ".cc", ".cpp", ".cxx", ".s", ".asm"})
HEADER_EXTENSIONS: frozenset[str] = frozenset({".h", ".hpp", ".hh", ".hxx"})
SOURCE_LIKE_EXTENSIONS: frozenset[str] = HEADER_EXTENSIONS | IMPLEMENTATION_EXTENSIONS

INCLUDE_DIR = "include"

SOURCE_TIER_EMPTY_INCLUDE_WARNING = (
    "Tier A source-preferred package should include source or header files under include/"
)


def list_files_recursive(root: Path) -> list[Path]:
    """All regular files under root, sorted; empty if root is not a directory."""
    if not root.is_dir():
        return []
    return sorted(p for p in root.rglob("*") if p.is_file())


def _files_with_extensions(root: Path, extensions: frozenset[str]) -> list[Path]:
    return [p for p in list_files_recursive(root) if p.suffix.lower() in extensions]


def resolve_inside_root(root: Path, relative: str) -> Path | None:
    """
    Resolve a manifest-relative path, or None if it escapes the root.

    Absolute paths and '..' traversal (including through symlinks) are
    rejected.
    """
    if Path(relative).is_absolute():
        return None
    resolved_root = root.resolve()
    candidate = (resolved_root / relative).resolve()
    try:
        candidate.relative_to(resolved_root)
    except ValueError:
        return None
    return candidate


def check_tier_content(source_dir: str | Path, manifest: Manifest) -> list[str]:
    """
    Validate a package tree against a validated manifest.

    Args:
        source_dir: Package root directory
        manifest: Output of validate_manifest

    Returns:
        Advisory warnings

    Raises:
        IntegrityError: If any declared binary's hash does not match; the
            error lists every content violation
        ContentValidationError: For any other content violation
    """
    root = Path(source_dir)
    errors: list[str] = []
    warnings: list[str] = []
    hash_mismatch = False

    for platform in manifest.platforms:
        binary = manifest.binary_for(platform)
        if binary is None:
            continue

        resolved = resolve_inside_root(root, binary.path)
        if resolved is None:
            errors.append(f"variants.{platform}.binary.path must stay inside package root: {binary.path}")
            continue
        if not resolved.is_file():
            errors.append(f"variants.{platform}.binary.path points to a missing file: {binary.path}")
            continue

        actual = sha256_file(resolved)
        logger.debug("Binary %s for %s hashes to %s", binary.path, platform, actual)
        if actual != binary.sha256:
            hash_mismatch = True
            errors.append(
                f"variants.{platform}.binary.sha256 does not match file contents for {binary.path} "
                f"(expected {binary.sha256}, got {actual})"
            )

    if manifest.is_binary_only:
        smuggled = _files_with_extensions(root, IMPLEMENTATION_EXTENSIONS)
        for path in smuggled:
            errors.append(
                f'distribution_tier "binary-only" cannot include source implementation files '
                f"({path.relative_to(root).as_posix()})"
            )
    else:
        if not _files_with_extensions(root / INCLUDE_DIR, SOURCE_LIKE_EXTENSIONS):
            warnings.append(SOURCE_TIER_EMPTY_INCLUDE_WARNING)

    if errors:
        if hash_mismatch:
            raise IntegrityError(
                "Package content validation failed:\n - " + "\n - ".join(errors),
                errors=errors,
            )
        raise ContentValidationError(errors)

    return warnings
