"""
Common test fixtures shared by all modules.

Provides factory functions for picopak documents and trees:
- picopak.json manifests (source and binary-only)
- package directories on disk
- index documents in both packages shapes
- a fake requests session serving canned responses
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Optional
from unittest.mock import Mock

import requests


# =============================================================================
# Manifest Factories
# =============================================================================

def make_manifest_doc(
    name: str = "FastLED",
    version: str = "3.10.2",
    tier: str = "source",
    platforms: Optional[list[str]] = None,
    **overrides: Any,
) -> dict[str, Any]:
    """
    Create a picopak.json document for testing.

    Source tier by default, with provenance, toolchain and abi present.
    Variants carry no binaries, so validation warns once per platform.
    """
    if platforms is None:
        platforms = ["rp2040", "rp2350"]

    doc: dict[str, Any] = {
        "name": name,
        "version": version,
        "description": "Addressable LED driver",
        "license": "MIT",
        "package_format": "2.0",
        "distribution_tier": tier,
        "platforms": list(platforms),
        "variants": {p: {"platform": p} for p in platforms},
        "provenance": {
            "source_repository": "https://github.com/FastLED/FastLED",
            "source_revision": "0123abcd",
        },
        "toolchain": {
            "compiler": "arm-none-eabi-gcc",
            "version": "13.2.1",
            "pico_sdk_version": "2.1.0",
        },
        "abi": {
            "optimization_flags": "-O2",
            "float_abi": "soft",
            "cxx_exceptions": False,
            "cxx_rtti": False,
        },
    }
    doc.update(overrides)
    return doc


def make_binary_only_doc(
    binaries: dict[str, tuple[str, str]],
    name: str = "FastLED",
    version: str = "3.10.2",
    **overrides: Any,
) -> dict[str, Any]:
    """
    Create a binary-only picopak.json.

    Args:
        binaries: platform -> (relative path, sha256 hex)
    """
    platforms = list(binaries)
    doc = make_manifest_doc(name=name, version=version, tier="binary-only", platforms=platforms)
    doc["variants"] = {
        p: {"platform": p, "binary": {"path": path, "sha256": digest}}
        for p, (path, digest) in binaries.items()
    }
    doc.update(overrides)
    return doc


# =============================================================================
# Package Tree Factories
# =============================================================================

def sha256_of(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def write_package_dir(
    root: Path,
    manifest: dict[str, Any],
    *,
    header: bool = True,
    cmake: bool = True,
    files: Optional[dict[str, bytes]] = None,
) -> Path:
    """
    Lay out a package directory (picopak.json, include/, cmake/<name>.cmake).

    Returns:
        The package directory
    """
    root.mkdir(parents=True, exist_ok=True)
    (root / "picopak.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    (root / "include").mkdir(exist_ok=True)
    if header:
        (root / "include" / f"{manifest['name']}.h").write_text("#pragma once\n", encoding="utf-8")
    if cmake:
        (root / "cmake").mkdir(exist_ok=True)
        (root / "cmake" / f"{manifest['name']}.cmake").write_text(
            f"add_library({manifest['name']} INTERFACE)\n", encoding="utf-8"
        )
    for rel, data in (files or {}).items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return root


# =============================================================================
# Index Factories
# =============================================================================

FASTLED_VERSIONS = ["3.10.1", "3.10.2", "3.10.3-rc1"]


def make_release(
    version: str,
    url: Optional[str] = None,
    platforms: tuple[str, ...] = ("rp2040", "rp2350"),
    sha256: Optional[str] = None,
) -> dict[str, Any]:
    """A release entry carrying an `artifacts` platform map."""
    base = url or f"https://example.com/FastLED-{version}"
    artifacts: dict[str, Any] = {}
    for p in platforms:
        entry: dict[str, Any] = {"url": f"{base}-{p}.picopak"}
        if sha256:
            entry["sha256"] = sha256
        artifacts[p] = entry
    return {"version": version, "artifacts": artifacts}


def make_array_index(
    name: str = "FastLED",
    versions: Optional[list[str]] = None,
    description: str = "Addressable LED driver",
) -> dict[str, Any]:
    """packages as an array, releases as an array."""
    versions = FASTLED_VERSIONS if versions is None else versions
    return {
        "packages": [
            {
                "name": name,
                "description": description,
                "releases": [make_release(v) for v in versions],
            }
        ]
    }


def make_map_index(
    name: str = "FastLED",
    versions: Optional[list[str]] = None,
    description: str = "Addressable LED driver",
    releases_as_map: bool = True,
) -> dict[str, Any]:
    """packages as a map keyed by name; releases as a map or an array."""
    versions = FASTLED_VERSIONS if versions is None else versions
    if releases_as_map:
        releases: Any = {v: make_release(v) for v in versions}
    else:
        releases = [make_release(v) for v in versions]
    return {
        "packages": {
            name: {
                "name": name,
                "description": description,
                "releases": releases,
            }
        }
    }


# =============================================================================
# HTTP Fakes
# =============================================================================

class FakeResponse:
    """Enough of requests.Response for HttpClient."""

    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b"",
        headers: Optional[dict[str, str]] = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}
        self.url = url
        self.closed = False

    def iter_content(self, chunk_size: int = 1024):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def close(self) -> None:
        self.closed = True


def json_response(data: Any, url: str = "") -> FakeResponse:
    return FakeResponse(200, json.dumps(data).encode("utf-8"), {"Content-Type": "application/json"}, url)


def redirect_response(location: str, status_code: int = 302) -> FakeResponse:
    return FakeResponse(status_code, b"", {"Location": location})


def make_mock_session(routes: dict[str, Any]) -> Mock:
    """
    A Mock requests.Session whose get() serves routes[url].

    A route value may be a FakeResponse, an exception instance to raise,
    or a list of either consumed in order. Unknown URLs return 404.
    """
    session = Mock(spec=requests.Session)
    pending = {url: list(v) if isinstance(v, list) else v for url, v in routes.items()}

    def _get(url: str, **kwargs: Any) -> FakeResponse:
        value = pending.get(url)
        if isinstance(value, list):
            value = value.pop(0)
        if value is None:
            return FakeResponse(404, b"not found", url=url)
        if isinstance(value, BaseException):
            raise value
        if not value.url:
            value.url = url
        return value

    session.get.side_effect = _get
    return session
