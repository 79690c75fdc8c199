"""
Module 01 - Schemas & Errors
File: manifest.py

Purpose: Typed package manifest (picopak.json) records.
These models are only ever constructed by the manifest validator, which
has already checked every field; they are frozen once built.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .versioning import PACKAGE_FORMAT, PackageFormat

# Target platforms of the Pico SDK
Platform = Literal["rp2040", "rp2350"]
KNOWN_PLATFORMS: tuple[str, ...] = ("rp2040", "rp2350")
DEFAULT_PLATFORM: str = "rp2040"

# "source" packages ship headers/sources; "binary-only" ship prebuilt libraries
DistributionTier = Literal["source", "binary-only"]
TIER_SOURCE: str = "source"
TIER_BINARY_ONLY: str = "binary-only"
LEGACY_TIER_SYNONYMS: dict[str, str] = {"source-preferred": TIER_SOURCE}


def normalize_platform(value: Any) -> str | None:
    """Return the canonical platform name, or None if unrecognized."""
    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    if normalized in KNOWN_PLATFORMS:
        return normalized
    return None


def normalize_tier(value: Any) -> str | None:
    """Return the canonical distribution tier, or None if unrecognized."""
    if not isinstance(value, str):
        return None
    if value in (TIER_SOURCE, TIER_BINARY_ONLY):
        return value
    return LEGACY_TIER_SYNONYMS.get(value)


class VariantBinary(BaseModel):
    """Prebuilt library for one platform, relative to the package root."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str = Field(..., min_length=1)
    sha256: str = Field(..., pattern=r"^[0-9a-f]{64}$")


class ManifestVariant(BaseModel):
    """Per-platform variant record."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    platform: Platform
    binary: VariantBinary | None = None


class ManifestProvenance(BaseModel):
    """Where a prebuilt binary was built from."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_repository: str = Field(..., min_length=1)
    source_revision: str = Field(..., min_length=1)


class ManifestToolchain(BaseModel):
    """Compiler and SDK used to build the binaries."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    compiler: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    pico_sdk_version: str | None = None


class ManifestAbi(BaseModel):
    """ABI-affecting build flags."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    optimization_flags: str = Field(..., min_length=1)
    float_abi: str = Field(..., min_length=1)
    cxx_exceptions: bool
    cxx_rtti: bool


class Manifest(BaseModel):
    """
    A validated package manifest (package_format 2.0).

    Re-validated on every load; never mutated in place.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    license: str = Field(..., min_length=1)
    package_format: PackageFormat = PACKAGE_FORMAT
    distribution_tier: DistributionTier
    platforms: list[Platform] = Field(..., min_length=1)
    variants: dict[Platform, ManifestVariant] = Field(default_factory=dict)
    provenance: ManifestProvenance | None = None
    toolchain: ManifestToolchain | None = None
    abi: ManifestAbi | None = None

    @property
    def is_binary_only(self) -> bool:
        return self.distribution_tier == TIER_BINARY_ONLY

    @property
    def channel(self) -> str:
        """Release channel inferred from the version string."""
        return "prerelease" if "-" in self.version else "stable"

    def binary_for(self, platform: str) -> VariantBinary | None:
        variant = self.variants.get(platform)  # type: ignore[call-overload]
        return variant.binary if variant else None

    def to_document(self) -> dict[str, Any]:
        """Serialize back to a picopak.json-shaped dict."""
        return self.model_dump(mode="json", exclude_none=True)


class InstallMetadata(BaseModel):
    """Reduced manifest record used on the install path."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    description: str
    license: str
    platforms: list[str] = Field(..., min_length=1)


class ManifestValidationResult(BaseModel):
    """Successful validation output: manifest plus advisory warnings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    manifest: Manifest
    warnings: list[str] = Field(default_factory=list)
