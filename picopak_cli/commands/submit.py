"""
Module 08 - CLI Submit Command

Generate a non-destructive index submission bundle for a packed archive.

Usage:
    picopak submit ./dist/my-lib-1.0.0.picopak --index-file ../picopak-index/index.json
    picopak submit ./dist/my-lib-1.0.0.picopak.metadata.json --artifact-url https://host/{file}
"""

from __future__ import annotations

from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Any, Optional

from picopak.schemas.errors import PicopakException
from workflows.submit import INSTRUCTIONS_FILE, prepare_submission

from picopak_cli.commands.common import (
    EXIT_SUCCESS,
    print_json,
    report_error,
    wants_json,
)


@dataclass
class SubmitSummary:
    """Summary of a submission bundle for CLI output."""
    package: str = ""
    version: str = ""
    bundle_dir: str = ""
    artifact_path: str = ""
    artifact_url: str = ""
    sha256: str = ""
    updated_index_path: Optional[str] = None
    patch_path: Optional[str] = None
    dry_run: bool = False
    success: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: SubmitSummary) -> None:
    """Print summary in human-readable format."""
    print(f"Prepared submission for {summary.package}@{summary.version}")
    print(f"bundle: {summary.bundle_dir}")
    print(f"artifact: {summary.artifact_path}")
    print(f"artifact_url: {summary.artifact_url}")
    print(f"sha256: {summary.sha256}")
    if summary.updated_index_path:
        print(f"updated index preview: {summary.updated_index_path}")
    if summary.patch_path:
        print(f"patch: {summary.patch_path}")
    if summary.dry_run:
        print("Dry run: index preview and patch were not written.")
    print(f"See {INSTRUCTIONS_FILE} in the bundle for next steps.")


def print_summary_json(summary: SubmitSummary) -> None:
    """Print summary as JSON."""
    print_json(summary.to_dict())


def submit_cmd(args: Namespace) -> int:
    """
    Execute the submit command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    output_json = wants_json(args)

    try:
        result = prepare_submission(
            args.input,
            output_dir=args.output,
            index_file=args.index_file,
            artifact_url=args.artifact_url,
            dry_run=args.dry_run,
        )
    except PicopakException as e:
        return report_error(e, output_json)

    summary = SubmitSummary(
        package=result.metadata.package.name,
        version=result.metadata.package.version,
        bundle_dir=str(result.bundle_dir),
        artifact_path=str(result.artifact_path),
        artifact_url=result.artifact_url,
        sha256=result.metadata.artifact.sha256,
        updated_index_path=str(result.updated_index_path) if result.updated_index_path else None,
        patch_path=str(result.patch_path) if result.patch_path else None,
        dry_run=args.dry_run,
        success=True,
    )

    if output_json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
