"""
Test fixtures package for picopak tests.

This package provides factory functions for creating test documents,
package trees and HTTP fakes.

Usage:
    from fixtures import make_manifest_doc, write_package_dir

    def test_something(tmp_path):
        pkg = write_package_dir(tmp_path / "FastLED", make_manifest_doc())
"""

from .common import (
    FASTLED_VERSIONS,
    FakeResponse,
    json_response,
    make_array_index,
    make_binary_only_doc,
    make_manifest_doc,
    make_map_index,
    make_mock_session,
    make_release,
    redirect_response,
    sha256_of,
    write_package_dir,
)

__all__ = [
    # Manifests
    "make_manifest_doc",
    "make_binary_only_doc",
    # Trees
    "sha256_of",
    "write_package_dir",
    # Indexes
    "FASTLED_VERSIONS",
    "make_release",
    "make_array_index",
    "make_map_index",
    # HTTP
    "FakeResponse",
    "json_response",
    "redirect_response",
    "make_mock_session",
]
