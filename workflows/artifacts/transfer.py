"""
Module 05 - Artifact Packaging & IO
File: transfer.py

Purpose: Download a remote artifact and verify its checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from picopak.crypto.hashing import parse_checksum, verify_file_checksum
from picopak.http.client import HttpClient
from picopak.schemas.errors import IntegrityError

logger = logging.getLogger(__name__)


def fetch_and_verify(
    url: str,
    destination: str | Path,
    checksum: Optional[str] = None,
    *,
    client: HttpClient,
) -> Path:
    """
    Download url to destination and verify it against checksum.

    The checksum algorithm is checked before any bytes are fetched. On a
    mismatch the downloaded file is deleted.

    Raises:
        TransportError: Unsupported checksum algorithm, network/HTTP
            failure, or too many redirects
        ChecksumMismatchError: Downloaded bytes do not match
    """
    if checksum:
        parse_checksum(checksum)

    dest = client.download(url, destination)
    if not checksum:
        logger.warning("No checksum published for %s; skipping verification", url)
        return dest

    try:
        digest = verify_file_checksum(dest, checksum)
    except IntegrityError:
        dest.unlink(missing_ok=True)
        raise
    logger.debug("Verified %s sha256=%s", dest, digest)
    return dest
