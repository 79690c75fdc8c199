"""
Checksum primitives shared by packaging, transfer and submission.
"""
from .hashing import (
    DEFAULT_CHECKSUM_ALGORITHM,
    SUPPORTED_CHECKSUM_ALGORITHMS,
    sha256_hex,
    sha256_file,
    is_sha256_hex,
    parse_checksum,
    verify_file_checksum,
)

__all__ = [
    "DEFAULT_CHECKSUM_ALGORITHM",
    "SUPPORTED_CHECKSUM_ALGORITHMS",
    "sha256_hex",
    "sha256_file",
    "is_sha256_hex",
    "parse_checksum",
    "verify_file_checksum",
]
