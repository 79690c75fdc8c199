"""
Module 03 - Manifest Validation
File: validator.py

Purpose: Parse an untyped picopak.json document into a typed, tier-complete
Manifest.

Every field-level violation is collected before failing; a caller always
sees the complete list. Advisory findings (recommended metadata missing
from a source-tier package) are returned as warnings.

Rules are applied in order:
1. required scalars, package_format, distribution_tier
2. platforms
3. per-platform variants and their binaries
4. tier-dependent completeness
"""

from __future__ import annotations

from typing import Any

from picopak.crypto.hashing import is_sha256_hex
from picopak.schemas.errors import ManifestValidationError
from picopak.schemas.manifest import (
    KNOWN_PLATFORMS,
    TIER_BINARY_ONLY,
    TIER_SOURCE,
    InstallMetadata,
    Manifest,
    ManifestAbi,
    ManifestProvenance,
    ManifestToolchain,
    ManifestValidationResult,
    ManifestVariant,
    VariantBinary,
    normalize_platform,
    normalize_tier,
)
from picopak.schemas.versioning import PACKAGE_FORMAT, is_supported_package_format

REQUIRED_SCALAR_FIELDS: tuple[str, ...] = ("name", "version", "description", "license")

_PLATFORM_LIST = " and ".join(f'"{p}"' for p in KNOWN_PLATFORMS)


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def _as_string_list(value: Any) -> list[str] | None:
    """Trimmed items of a list of non-empty strings; None for anything else."""
    if not isinstance(value, list):
        return None
    if any(not _is_non_empty_string(item) for item in value):
        return None
    return [item.strip() for item in value]


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def _parse_provenance(node: Any) -> ManifestProvenance | None:
    if not isinstance(node, dict):
        return None
    if not (_is_non_empty_string(node.get("source_repository"))
            and _is_non_empty_string(node.get("source_revision"))):
        return None
    return ManifestProvenance(
        source_repository=node["source_repository"].strip(),
        source_revision=node["source_revision"].strip(),
    )


def _parse_toolchain(node: Any) -> ManifestToolchain | None:
    if not isinstance(node, dict):
        return None
    if not (_is_non_empty_string(node.get("compiler")) and _is_non_empty_string(node.get("version"))):
        return None
    sdk_version = node.get("pico_sdk_version")
    return ManifestToolchain(
        compiler=node["compiler"].strip(),
        version=node["version"].strip(),
        pico_sdk_version=sdk_version.strip() if _is_non_empty_string(sdk_version) else None,
    )


def _parse_abi(node: Any) -> ManifestAbi | None:
    if not isinstance(node, dict):
        return None
    if not (_is_non_empty_string(node.get("optimization_flags"))
            and _is_non_empty_string(node.get("float_abi"))
            and isinstance(node.get("cxx_exceptions"), bool)
            and isinstance(node.get("cxx_rtti"), bool)):
        return None
    return ManifestAbi(
        optimization_flags=node["optimization_flags"].strip(),
        float_abi=node["float_abi"].strip(),
        cxx_exceptions=node["cxx_exceptions"],
        cxx_rtti=node["cxx_rtti"],
    )


def _validate_variants(
    variants_node: Any,
    platforms: list[str],
    errors: list[str],
) -> dict[str, ManifestVariant]:
    variants: dict[str, ManifestVariant] = {}
    if not isinstance(variants_node, dict):
        errors.append("variants must be an object")
        variants_node = {}

    for platform in platforms:
        variant = variants_node.get(platform)
        if not isinstance(variant, dict):
            errors.append(f"variants.{platform} must be an object")
            continue
        if normalize_platform(variant.get("platform")) != platform:
            errors.append(f'variants.{platform}.platform must be "{platform}"')

        binary = None
        if "binary" in variant and variant["binary"] is not None:
            binary_node = variant["binary"]
            if not isinstance(binary_node, dict):
                errors.append(f"variants.{platform}.binary must be an object")
            elif not (_is_non_empty_string(binary_node.get("path"))
                      and _is_non_empty_string(binary_node.get("sha256"))):
                errors.append(
                    f"variants.{platform}.binary.path and variants.{platform}.binary.sha256 "
                    "must be non-empty strings"
                )
            elif not is_sha256_hex(binary_node["sha256"].strip()):
                errors.append(f"variants.{platform}.binary.sha256 must be a 64-character hex SHA256")
            else:
                binary = VariantBinary(
                    path=binary_node["path"].strip(),
                    sha256=binary_node["sha256"].strip().lower(),
                )

        variants[platform] = ManifestVariant(platform=platform, binary=binary)  # type: ignore[arg-type]

    return variants


def validate_manifest(document: Any) -> ManifestValidationResult:
    """
    Validate a parsed picopak.json (package_format 2.0).

    Args:
        document: Untyped JSON value, normally a dict

    Returns:
        ManifestValidationResult with the normalized manifest and warnings

    Raises:
        ManifestValidationError: Carrying every violation found
    """
    if not isinstance(document, dict):
        raise ManifestValidationError(["manifest must be a JSON object"])

    errors: list[str] = []
    warnings: list[str] = []

    # 1. scalars, format, tier
    for field_name in REQUIRED_SCALAR_FIELDS:
        if not _is_non_empty_string(document.get(field_name)):
            errors.append(f"{field_name} must be a non-empty string")
    if not is_supported_package_format(document.get("package_format")):
        errors.append(f'package_format must be "{PACKAGE_FORMAT}"')
    tier = normalize_tier(document.get("distribution_tier"))
    if tier is None:
        errors.append(f'distribution_tier must be "{TIER_SOURCE}" or "{TIER_BINARY_ONLY}"')

    # 2. platforms
    raw_platforms = _as_string_list(document.get("platforms"))
    platforms: list[str] = []
    if not raw_platforms:
        errors.append("platforms must be a non-empty string array")
    else:
        unknown = [p for p in raw_platforms if normalize_platform(p) is None]
        if unknown:
            errors.append(
                f"platforms may only contain {_PLATFORM_LIST} (got: {', '.join(unknown)})"
            )
        platforms = _dedupe([p for p in map(normalize_platform, raw_platforms) if p])

    # 3. variants
    variants = _validate_variants(document.get("variants"), platforms, errors)

    # 4. tier completeness
    provenance = _parse_provenance(document.get("provenance"))
    toolchain = _parse_toolchain(document.get("toolchain"))
    abi = _parse_abi(document.get("abi"))

    if tier == TIER_BINARY_ONLY:
        required = f'required for distribution_tier "{TIER_BINARY_ONLY}"'
        if provenance is None:
            errors.append(f"provenance.source_repository and provenance.source_revision are {required}")
        if toolchain is None:
            errors.append(f"toolchain.compiler and toolchain.version are {required}")
        elif toolchain.pico_sdk_version is None:
            errors.append(f"toolchain.pico_sdk_version is {required}")
        if abi is None:
            errors.append(
                "abi.optimization_flags, abi.float_abi, abi.cxx_exceptions, "
                f"and abi.cxx_rtti are {required}"
            )
        for platform in platforms:
            variant = variants.get(platform)
            if variant is None or variant.binary is None:
                errors.append(f"variants.{platform}.binary is {required}")
    elif tier == TIER_SOURCE:
        recommended = "Recommended for source tier:"
        if provenance is None:
            warnings.append(f"{recommended} provenance.source_repository and provenance.source_revision")
        if toolchain is None:
            warnings.append(f"{recommended} toolchain.compiler and toolchain.version")
        elif toolchain.pico_sdk_version is None:
            warnings.append(f"{recommended} toolchain.pico_sdk_version")
        if abi is None:
            warnings.append(
                f"{recommended} abi.optimization_flags, abi.float_abi, "
                "abi.cxx_exceptions, and abi.cxx_rtti"
            )
        for platform in platforms:
            variant = variants.get(platform)
            if variant is None or variant.binary is None:
                warnings.append(f"{recommended} variants.{platform}.binary")

    if errors:
        raise ManifestValidationError(errors)

    manifest = Manifest(
        name=document["name"].strip(),
        version=document["version"].strip(),
        description=document["description"].strip(),
        license=document["license"].strip(),
        package_format=PACKAGE_FORMAT,  # type: ignore[arg-type]
        distribution_tier=tier,  # type: ignore[arg-type]
        platforms=platforms,  # type: ignore[arg-type]
        variants=variants,  # type: ignore[arg-type]
        provenance=provenance,
        toolchain=toolchain,
        abi=abi,
    )
    return ManifestValidationResult(manifest=manifest, warnings=warnings)


def validate_install_metadata(document: Any) -> InstallMetadata:
    """
    Reduced validation used when installing an archive.

    A package_format 2.0 document goes through the full validator; a
    legacy schema-less document needs only name, version, description,
    license and a non-empty platforms list.

    Raises:
        ManifestValidationError: If the document is unusable
    """
    if isinstance(document, dict) and document.get("package_format") == PACKAGE_FORMAT:
        manifest = validate_manifest(document).manifest
        return InstallMetadata(
            name=manifest.name,
            version=manifest.version,
            description=manifest.description,
            license=manifest.license,
            platforms=list(manifest.platforms),
        )

    legacy_error = "legacy manifest requires name, version, description, license, and non-empty platforms"
    if not isinstance(document, dict):
        raise ManifestValidationError([legacy_error])

    platforms = _as_string_list(document.get("platforms"))
    if not all(_is_non_empty_string(document.get(f)) for f in REQUIRED_SCALAR_FIELDS) or not platforms:
        raise ManifestValidationError([legacy_error])

    return InstallMetadata(
        name=document["name"].strip(),
        version=document["version"].strip(),
        description=document["description"].strip(),
        license=document["license"].strip(),
        platforms=platforms,
    )
