"""
Module 02 - Hashing Utilities
SHA-256 helpers and checksum-string parsing.

This module provides:
- SHA-256 hex digests for bytes and files (streamed in chunks)
- Validation of 64-character hex digests
- Parsing of "algorithm:hexvalue" / bare-hex checksum strings
- File verification against a checksum string

The sha256 digest is the only trust anchor for artifacts; there is no
signature scheme.
"""
from __future__ import annotations

import hashlib
import re
from pathlib import Path

from picopak.schemas.errors import ChecksumMismatchError, TransportError

DEFAULT_CHECKSUM_ALGORITHM = "sha256"
SUPPORTED_CHECKSUM_ALGORITHMS: frozenset[str] = frozenset({DEFAULT_CHECKSUM_ALGORITHM})

SHA256_HEX_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")

_CHUNK_SIZE = 1024 * 64


def sha256_hex(data: bytes) -> str:
    """
    Compute the SHA-256 hex digest of raw bytes.

    Example:
        >>> sha256_hex(b"hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).hexdigest()


def sha256_file(path: str | Path) -> str:
    """Compute the SHA-256 hex digest of a file without loading it whole."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def is_sha256_hex(value: object) -> bool:
    """Check for a 64-character hex digest (either case)."""
    return isinstance(value, str) and SHA256_HEX_PATTERN.match(value) is not None


def parse_checksum(checksum: str) -> tuple[str, str]:
    """
    Split a checksum string into (algorithm, lowercase hex value).

    "sha256:ABC..." and bare "abc..." are both accepted; a bare value
    defaults to sha256.

    Raises:
        TransportError: If the algorithm is not supported.
    """
    normalized = checksum.strip().lower()
    if ":" in normalized:
        algorithm, value = normalized.split(":", 1)
    else:
        algorithm, value = DEFAULT_CHECKSUM_ALGORITHM, normalized

    if algorithm not in SUPPORTED_CHECKSUM_ALGORITHMS:
        raise TransportError(
            f'Unsupported checksum algorithm "{algorithm}". Only sha256 is supported.'
        )
    return algorithm, value.strip()


def verify_file_checksum(path: str | Path, checksum: str) -> str:
    """
    Hash a file and compare it with a checksum string.

    Returns:
        The computed hex digest.

    Raises:
        TransportError: If the checksum algorithm is unsupported.
        ChecksumMismatchError: If the digest differs.
    """
    _, expected = parse_checksum(checksum)
    actual = sha256_file(path)
    if actual != expected:
        raise ChecksumMismatchError(str(path), expected, actual)
    return actual
