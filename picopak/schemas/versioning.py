"""
Module 01 - Schemas & Errors
File: versioning.py

Purpose: Centralize manifest/metadata format version constants.
This file must remain tiny and have no imports from other schema files
to avoid circular dependencies.
"""

from typing import Literal

# The only manifest schema validated by the packaging path
PACKAGE_FORMAT: str = "2.0"

# Schema version of the pack metadata sidecar
METADATA_SCHEMA_VERSION: str = "1.0"

PackageFormat = Literal["2.0"]
MetadataSchemaVersion = Literal["1.0"]

SUPPORTED_PACKAGE_FORMATS: frozenset[str] = frozenset({PACKAGE_FORMAT})
SUPPORTED_METADATA_SCHEMA_VERSIONS: frozenset[str] = frozenset({METADATA_SCHEMA_VERSION})


class UnsupportedMetadataSchemaError(ValueError):
    """Raised when a pack metadata sidecar declares an unknown schema_version."""

    def __init__(self, version: object, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_METADATA_SCHEMA_VERSIONS
        super().__init__(
            f"Unsupported metadata schema: '{version}'. "
            f"Supported versions: {sorted(self.supported)}"
        )


def assert_supported_metadata_schema(version: object) -> None:
    """
    Validate that the given sidecar schema version is supported.

    Raises:
        UnsupportedMetadataSchemaError: If the version is not supported.
    """
    if version not in SUPPORTED_METADATA_SCHEMA_VERSIONS:
        raise UnsupportedMetadataSchemaError(version)


def is_supported_package_format(value: object) -> bool:
    """Check if a manifest package_format is supported without raising."""
    return value in SUPPORTED_PACKAGE_FORMATS
