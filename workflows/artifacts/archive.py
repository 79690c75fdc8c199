"""
Module 05 - Artifact Packaging & IO
File: archive.py

Purpose: Create and extract .picopak archives (zip containers).
"""

from __future__ import annotations

import os
import tempfile
import zipfile
from pathlib import Path

from picopak.schemas.errors import FormatError, IntegrityError

ARCHIVE_SUFFIX = ".picopak"


def archive_name(package_name: str, version: str) -> str:
    """Conventional archive file name: <name>-<version>.picopak."""
    return f"{package_name}-{version}{ARCHIVE_SUFFIX}"


def create_archive(source_dir: str | Path, output_path: str | Path) -> Path:
    """
    Zip the top-level entries of source_dir into output_path.

    Entries are stored relative to source_dir (no wrapping folder). The
    archive is written to a temp file beside the target and renamed into
    place, so a failed build never leaves a half-written archive.

    Returns:
        Path to the created archive
    """
    src = Path(source_dir)
    out_path = Path(output_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{out_path.name}.", suffix=".zip", dir=out_path.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        with zipfile.ZipFile(tmp_path, "w", zipfile.ZIP_DEFLATED) as zf:
            for root, dirs, files in os.walk(src):
                dirs.sort()
                root_path = Path(root)
                # the archive being written may live inside the source tree
                for file in sorted(files):
                    file_path = root_path / file
                    if file_path.resolve() in (tmp_path.resolve(), out_path.resolve()):
                        continue
                    zf.write(file_path, file_path.relative_to(src).as_posix())
        os.replace(tmp_path, out_path)
    finally:
        tmp_path.unlink(missing_ok=True)

    return out_path


def _check_member(dest: Path, member: str) -> None:
    target = (dest / member).resolve()
    try:
        target.relative_to(dest)
    except ValueError:
        raise IntegrityError(f"Archive member escapes extraction directory: {member}") from None


def extract_archive(archive_path: str | Path, dest_dir: str | Path) -> Path:
    """
    Extract an archive, rejecting members that would land outside dest_dir.

    Raises:
        FormatError: Not a zip container
        IntegrityError: A member path escapes the destination
    """
    path = Path(archive_path)
    dest = Path(dest_dir).resolve()
    if not zipfile.is_zipfile(path):
        raise FormatError(f"Not a valid .picopak archive: {path}")

    dest.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "r") as zf:
        for member in zf.namelist():
            _check_member(dest, member)
        zf.extractall(dest)
    return dest


def list_archive(archive_path: str | Path) -> list[str]:
    """Member names of an archive, files only."""
    path = Path(archive_path)
    if not zipfile.is_zipfile(path):
        raise FormatError(f"Not a valid .picopak archive: {path}")
    with zipfile.ZipFile(path, "r") as zf:
        return [info.filename for info in zf.infolist() if not info.is_dir()]
