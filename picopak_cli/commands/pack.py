"""
Module 08 - CLI Pack Command

Build a .picopak archive and its metadata sidecar from a package directory.

Usage:
    picopak pack ./my-lib --output ./dist
"""

from __future__ import annotations

import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from picopak.schemas.errors import PicopakException
from workflows.artifacts.pack import pack_directory

from picopak_cli.commands.common import (
    EXIT_SUCCESS,
    print_json,
    report_error,
    wants_json,
)


@dataclass
class PackSummary:
    """Summary of pack creation for CLI output."""
    source_dir: str = ""
    package: str = ""
    version: str = ""
    archive_path: str = ""
    metadata_path: str = ""
    sha256: str = ""
    size_bytes: int = 0
    distribution_tier: str = ""
    platforms: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    success: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: PackSummary) -> None:
    """Print summary in human-readable format."""
    for warning in summary.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    print(f"Created package: {summary.archive_path}")
    print(f"package: {summary.package}@{summary.version}")
    print(f"tier: {summary.distribution_tier}")
    print(f"platforms: {', '.join(summary.platforms)}")
    print(f"sha256: {summary.sha256}")
    print(f"size: {summary.size_bytes} bytes")
    print(f"metadata: {summary.metadata_path}")


def print_summary_json(summary: PackSummary) -> None:
    """Print summary as JSON."""
    print_json(summary.to_dict())


def pack_cmd(args: Namespace) -> int:
    """
    Execute the pack command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    output_json = wants_json(args)

    try:
        result = pack_directory(args.source_dir, args.output)
    except PicopakException as e:
        return report_error(e, output_json)

    summary = PackSummary(
        source_dir=str(args.source_dir),
        package=result.manifest.name,
        version=result.manifest.version,
        archive_path=str(result.archive_path),
        metadata_path=str(result.metadata_path),
        sha256=result.metadata.artifact.sha256,
        size_bytes=result.metadata.artifact.size_bytes,
        distribution_tier=result.manifest.distribution_tier,
        platforms=list(result.manifest.platforms),
        warnings=list(result.warnings),
        success=True,
    )

    if output_json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
