"""
Module 03 - Manifest Validation

Manifest schema validation and tier content checks for picopak.json
packages.
"""

from .validator import validate_install_metadata, validate_manifest
from .content import (
    HEADER_EXTENSIONS,
    IMPLEMENTATION_EXTENSIONS,
    SOURCE_LIKE_EXTENSIONS,
    check_tier_content,
    list_files_recursive,
    resolve_inside_root,
)

__all__ = [
    "validate_manifest",
    "validate_install_metadata",
    "HEADER_EXTENSIONS",
    "IMPLEMENTATION_EXTENSIONS",
    "SOURCE_LIKE_EXTENSIONS",
    "check_tier_content",
    "list_files_recursive",
    "resolve_inside_root",
]
