"""
Module 08 - CLI Install Command

Install a package by name (resolved from the index) or from a local
.picopak file into <project>/libs/.

Usage:
    picopak install FastLED --project ./firmware
    picopak install FastLED --version 3.10.3-rc1
    picopak install ./dist/my-lib-1.0.0.picopak --list
"""

from __future__ import annotations

import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from picopak.schemas.errors import PicopakException
from workflows.install import install_package

from picopak_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    http_client_for,
    print_json,
    report_error,
    runtime_config_for,
    wants_json,
)


@dataclass
class InstallSummary:
    """Summary of an install for CLI output."""
    reference: str = ""
    package: str = ""
    version: str = ""
    description: str = ""
    license: str = ""
    platforms: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    install_dir: Optional[str] = None
    download_url: Optional[str] = None
    resolved_platform: Optional[str] = None
    replaced_existing: bool = False
    listed_only: bool = False
    success: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: InstallSummary) -> None:
    """Print summary in human-readable format."""
    if summary.download_url:
        print(f"Resolved {summary.package}@{summary.version} for {summary.resolved_platform}")
        print(f"  from {summary.download_url}")

    if summary.listed_only:
        print(f"Package: {summary.package} {summary.version}")
        print(f"Description: {summary.description}")
        print(f"License: {summary.license}")
        print(f"Platforms: {', '.join(summary.platforms)}")
        print("Files:")
        for name in summary.files:
            print(f"  {name}")
        return

    if summary.replaced_existing:
        print(f"Replaced existing installation of {summary.package}")
    print(f"Installed {summary.package} {summary.version} to {summary.install_dir}")
    print()
    print("Add to your CMakeLists.txt:")
    print(f"  include(libs/{summary.package}/cmake/{summary.package}.cmake)")
    print(f"  target_link_libraries(your_target {summary.package})")


def print_summary_json(summary: InstallSummary) -> None:
    """Print summary as JSON."""
    print_json(summary.to_dict())


def install_cmd(args: Namespace) -> int:
    """
    Execute the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    output_json = wants_json(args)

    try:
        config = runtime_config_for(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    with http_client_for(config) as client:
        try:
            result = install_package(
                args.package,
                config,
                project_dir=args.project,
                version=args.version,
                include_prerelease=args.include_prerelease,
                platform=config.platform,
                list_only=args.list,
                client=client,
            )
        except PicopakException as e:
            return report_error(e, output_json)

    metadata = result.metadata
    summary = InstallSummary(
        reference=args.package,
        package=metadata.name,
        version=metadata.version,
        description=metadata.description,
        license=metadata.license,
        platforms=list(metadata.platforms),
        files=list(result.files),
        install_dir=str(result.install_dir) if result.install_dir else None,
        download_url=result.resolved.download_url if result.resolved else None,
        resolved_platform=result.resolved.platform if result.resolved else None,
        replaced_existing=result.replaced_existing,
        listed_only=result.listed_only,
        success=True,
    )

    if output_json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
