"""
Module 01 - Schemas & Errors
File: metadata.py

Purpose: Pack metadata sidecar and index release payload records.

The sidecar (<archive>.metadata.json) is written by `picopak pack` and is
the hand-off document consumed by the submit workflow; the release
payload is the entry that workflow inserts into an index.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .manifest import (
    KNOWN_PLATFORMS,
    DistributionTier,
    Manifest,
    ManifestAbi,
    ManifestProvenance,
    ManifestToolchain,
    VariantBinary,
)
from .versioning import METADATA_SCHEMA_VERSION, MetadataSchemaVersion, PackageFormat

ReleaseChannel = Literal["stable", "prerelease"]


class PackageSummary(BaseModel):
    """The manifest fields carried into the sidecar."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    channel: ReleaseChannel
    package_format: PackageFormat
    distribution_tier: DistributionTier
    description: str = Field(..., min_length=1)
    license: str = Field(..., min_length=1)
    platforms: list[str]
    provenance: ManifestProvenance | None = None
    toolchain: ManifestToolchain | None = None
    abi: ManifestAbi | None = None

    @property
    def is_prerelease(self) -> bool:
        return self.channel == "prerelease"


class ArtifactDescriptor(BaseModel):
    """A produced archive: name, location, hash and size."""

    model_config = ConfigDict(extra="forbid")

    file_name: str = Field(..., min_length=1)
    file_path: str = ""
    sha256: str = Field(..., pattern=r"^[0-9a-fA-F]{64}$")
    size_bytes: int = Field(..., ge=0)


class PlatformAvailability(BaseModel):
    """Whether a platform is supported and which prebuilt binary serves it."""

    model_config = ConfigDict(extra="forbid")

    supported: bool
    binary: VariantBinary | None = None


class PackMetadata(BaseModel):
    """
    Pack metadata sidecar (schema_version 1.0).

    Example:
        {
          "schema_version": "1.0",
          "package": {"name": "FastLED", "version": "3.10.2", ...},
          "artifact": {"file_name": "FastLED-3.10.2.picopak", "sha256": "...", ...},
          "platform_availability": {"rp2040": {"supported": true}, ...}
        }
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: MetadataSchemaVersion = METADATA_SCHEMA_VERSION
    package: PackageSummary
    artifact: ArtifactDescriptor
    platform_availability: dict[str, PlatformAvailability]

    @classmethod
    def from_manifest(cls, manifest: Manifest, artifact: ArtifactDescriptor) -> "PackMetadata":
        """Build the sidecar for an archive produced from `manifest`."""
        availability = {
            platform: PlatformAvailability(
                supported=platform in manifest.platforms,
                binary=manifest.binary_for(platform),
            )
            for platform in KNOWN_PLATFORMS
        }
        return cls(
            package=PackageSummary(
                name=manifest.name,
                version=manifest.version,
                channel=manifest.channel,  # type: ignore[arg-type]
                package_format=manifest.package_format,
                distribution_tier=manifest.distribution_tier,
                description=manifest.description,
                license=manifest.license,
                platforms=list(manifest.platforms),
                provenance=manifest.provenance,
                toolchain=manifest.toolchain,
                abi=manifest.abi,
            ),
            artifact=artifact,
            platform_availability=availability,
        )

    def supported_platforms(self) -> list[str]:
        return [p for p, a in self.platform_availability.items() if a.supported]

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ReleaseArtifact(BaseModel):
    """Download location and hash for one platform in a release payload."""

    model_config = ConfigDict(extra="forbid")

    url: str = Field(..., min_length=1)
    sha256: str


class ReleasePayload(BaseModel):
    """A release entry ready to be inserted into an index document."""

    model_config = ConfigDict(extra="forbid")

    version: str = Field(..., min_length=1)
    prerelease: bool
    description: str
    license: str
    package_format: str
    distribution_tier: str
    artifacts: dict[str, ReleaseArtifact] = Field(default_factory=dict)

    @classmethod
    def from_metadata(cls, metadata: PackMetadata, artifact_url: str) -> "ReleasePayload":
        """Every supported platform points at the same archive."""
        artifacts = {
            platform: ReleaseArtifact(url=artifact_url, sha256=metadata.artifact.sha256)
            for platform in metadata.supported_platforms()
        }
        return cls(
            version=metadata.package.version,
            prerelease=metadata.package.is_prerelease,
            description=metadata.package.description,
            license=metadata.package.license,
            package_format=metadata.package.package_format,
            distribution_tier=metadata.package.distribution_tier,
            artifacts=artifacts,
        )

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
