"""
Module 01 - Schemas & Errors
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Version constants
from .versioning import (
    METADATA_SCHEMA_VERSION,
    PACKAGE_FORMAT,
    SUPPORTED_METADATA_SCHEMA_VERSIONS,
    SUPPORTED_PACKAGE_FORMATS,
    MetadataSchemaVersion,
    PackageFormat,
    UnsupportedMetadataSchemaError,
    assert_supported_metadata_schema,
    is_supported_package_format,
)

# Error models and exceptions
from .errors import (
    ChecksumMismatchError,
    ConflictError,
    ContentValidationError,
    ErrorCodes,
    FormatError,
    IntegrityError,
    ManifestValidationError,
    MetadataValidationError,
    NoArtifactError,
    NotFoundError,
    PicopakError,
    PicopakException,
    TransportError,
    ValidationError,
)

# Manifest schemas
from .manifest import (
    DEFAULT_PLATFORM,
    KNOWN_PLATFORMS,
    LEGACY_TIER_SYNONYMS,
    TIER_BINARY_ONLY,
    TIER_SOURCE,
    DistributionTier,
    InstallMetadata,
    Manifest,
    ManifestAbi,
    ManifestProvenance,
    ManifestToolchain,
    ManifestValidationResult,
    ManifestVariant,
    Platform,
    VariantBinary,
    normalize_platform,
    normalize_tier,
)

# Index records
from .index import (
    ARTIFACT_HASH_FIELDS,
    ARTIFACT_MAP_FIELDS,
    ARTIFACT_URL_FIELDS,
    ArtifactRef,
    PackageNode,
    ReleaseEntry,
    ResolvedRelease,
)

# Pack metadata and release payloads
from .metadata import (
    ArtifactDescriptor,
    PackageSummary,
    PackMetadata,
    PlatformAvailability,
    ReleaseArtifact,
    ReleaseChannel,
    ReleasePayload,
)

__all__ = [
    # Versioning
    "METADATA_SCHEMA_VERSION",
    "PACKAGE_FORMAT",
    "SUPPORTED_METADATA_SCHEMA_VERSIONS",
    "SUPPORTED_PACKAGE_FORMATS",
    "MetadataSchemaVersion",
    "PackageFormat",
    "UnsupportedMetadataSchemaError",
    "assert_supported_metadata_schema",
    "is_supported_package_format",
    # Errors
    "ChecksumMismatchError",
    "ConflictError",
    "ContentValidationError",
    "ErrorCodes",
    "FormatError",
    "IntegrityError",
    "ManifestValidationError",
    "MetadataValidationError",
    "NoArtifactError",
    "NotFoundError",
    "PicopakError",
    "PicopakException",
    "TransportError",
    "ValidationError",
    # Manifest
    "DEFAULT_PLATFORM",
    "KNOWN_PLATFORMS",
    "LEGACY_TIER_SYNONYMS",
    "TIER_BINARY_ONLY",
    "TIER_SOURCE",
    "DistributionTier",
    "InstallMetadata",
    "Manifest",
    "ManifestAbi",
    "ManifestProvenance",
    "ManifestToolchain",
    "ManifestValidationResult",
    "ManifestVariant",
    "Platform",
    "VariantBinary",
    "normalize_platform",
    "normalize_tier",
    # Index
    "ARTIFACT_HASH_FIELDS",
    "ARTIFACT_MAP_FIELDS",
    "ARTIFACT_URL_FIELDS",
    "ArtifactRef",
    "PackageNode",
    "ReleaseEntry",
    "ResolvedRelease",
    # Metadata
    "ArtifactDescriptor",
    "PackageSummary",
    "PackMetadata",
    "PlatformAvailability",
    "ReleaseArtifact",
    "ReleaseChannel",
    "ReleasePayload",
]
