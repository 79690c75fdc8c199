"""
Module 01 - Schemas & Errors
File: index.py

Purpose: Records read out of (and resolved from) a release index document.

Index documents are untrusted JSON in several historical shapes. The
constructors here only accept fields whose type has been checked; a
field of the wrong type is treated as absent.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from picopak.semver import is_prerelease_version

# Per-platform artifact maps, in resolution priority order
ARTIFACT_MAP_FIELDS: tuple[str, ...] = ("artifacts", "platforms", "files", "downloads")

# Historical spellings of an artifact's download location and hash
ARTIFACT_URL_FIELDS: tuple[str, ...] = ("url", "downloadUrl", "asset", "file")
ARTIFACT_HASH_FIELDS: tuple[str, ...] = ("sha256", "sha_256")


def _str_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class ArtifactRef(BaseModel):
    """A downloadable artifact location with its optional checksum."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    url: str = Field(..., min_length=1)
    checksum: str | None = None

    @classmethod
    def from_value(cls, value: Any) -> "ArtifactRef | None":
        """
        Normalize one artifact candidate.

        Accepts a bare URL string or an object carrying the URL under any
        historical field name. Both hash spellings end up in `checksum`;
        an explicit `checksum` field takes precedence.
        """
        if isinstance(value, str):
            url = _str_or_none(value)
            return cls(url=url) if url else None
        if not isinstance(value, dict):
            return None

        url = None
        for field_name in ARTIFACT_URL_FIELDS:
            url = _str_or_none(value.get(field_name))
            if url:
                break
        if not url:
            return None

        checksum = _str_or_none(value.get("checksum"))
        if checksum is None:
            for field_name in ARTIFACT_HASH_FIELDS:
                checksum = _str_or_none(value.get(field_name))
                if checksum:
                    break
        return cls(url=url, checksum=checksum)


class ReleaseEntry(BaseModel):
    """
    One published version of a package inside the index.

    Keeps every artifact-bearing field of the source node so that the
    resolver can apply its priority order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str = Field(..., min_length=1)
    prerelease: bool | None = None

    # single embedded platform + url pair
    platform: str | None = None
    url: str | None = None
    checksum: str | None = None
    sha256: str | None = None

    artifact: Any = None
    assets: list[Any] = Field(default_factory=list)
    artifacts: dict[str, Any] | None = None
    platforms: dict[str, Any] | None = None
    files: dict[str, Any] | None = None
    downloads: dict[str, Any] | None = None

    @property
    def is_prerelease(self) -> bool:
        """Explicit flag wins; otherwise a '-' suffix marks a prerelease."""
        if self.prerelease is not None:
            return self.prerelease
        return is_prerelease_version(self.version)

    def artifact_map(self, field_name: str) -> dict[str, Any] | None:
        return getattr(self, field_name)

    @classmethod
    def from_node(cls, node: Any, version_key: str | None = None) -> "ReleaseEntry | None":
        """
        Build a ReleaseEntry from an index node.

        Array-shaped releases must carry a string `version`; map-shaped
        releases fall back to their key. Returns None for unusable nodes.
        """
        if not isinstance(node, dict):
            return None
        version = _str_or_none(node.get("version")) or _str_or_none(version_key)
        if version is None:
            return None

        prerelease = node.get("prerelease")
        maps = {
            field_name: node[field_name]
            for field_name in ARTIFACT_MAP_FIELDS
            if isinstance(node.get(field_name), dict)
        }
        assets = node.get("assets")
        return cls(
            version=version,
            prerelease=prerelease if isinstance(prerelease, bool) else None,
            platform=_str_or_none(node.get("platform")),
            url=_str_or_none(node.get("url")),
            checksum=_str_or_none(node.get("checksum")),
            sha256=_str_or_none(node.get("sha256")),
            artifact=node.get("artifact"),
            assets=assets if isinstance(assets, list) else [],
            **maps,
        )


class PackageNode(BaseModel):
    """A package located in the index with its releases normalized."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    description: str | None = None
    releases: list[ReleaseEntry] = Field(default_factory=list)


class ResolvedRelease(BaseModel):
    """Output of resolution. Ephemeral; never persisted."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    package_name: str
    version: str
    platform: str
    download_url: str
    checksum: str | None = None
