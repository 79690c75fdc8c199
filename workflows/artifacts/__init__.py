"""
Module 05 - Artifact Packaging & IO

Archive creation/extraction, JSON document IO, packing and checksum
verified transfer.
"""

from workflows.artifacts.archive import (
    ARCHIVE_SUFFIX,
    archive_name,
    create_archive,
    extract_archive,
    list_archive,
)

from workflows.artifacts.io import (
    dump_json,
    read_json_file,
    write_json_file,
)

from workflows.artifacts.pack import (
    METADATA_SUFFIX,
    MANIFEST_FILE,
    PackResult,
    describe_artifact,
    metadata_path_for,
    pack_directory,
)

from workflows.artifacts.transfer import fetch_and_verify

__all__ = [
    # Archive
    "ARCHIVE_SUFFIX",
    "archive_name",
    "create_archive",
    "extract_archive",
    "list_archive",
    # IO
    "dump_json",
    "read_json_file",
    "write_json_file",
    # Pack
    "METADATA_SUFFIX",
    "MANIFEST_FILE",
    "PackResult",
    "describe_artifact",
    "metadata_path_for",
    "pack_directory",
    # Transfer
    "fetch_and_verify",
]
