"""
Module 08 - CLI Resolve Command

Resolve a package name against the candidate indexes without
downloading anything.

Usage:
    picopak resolve FastLED --platform rp2350 --include-prerelease
"""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path

from picopak.index.resolver import detect_platform
from picopak.index.service import resolve_from_candidates
from picopak.schemas.errors import PicopakException

from picopak_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    http_client_for,
    print_json,
    report_error,
    runtime_config_for,
    wants_json,
)


def resolve_cmd(args: Namespace) -> int:
    """Print the resolved release for a package."""
    output_json = wants_json(args)

    try:
        config = runtime_config_for(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    platform = detect_platform(Path(args.project), config)
    with http_client_for(config) as client:
        try:
            resolved = resolve_from_candidates(
                args.package,
                config,
                client,
                platform=platform,
                version=args.version,
                include_prerelease=args.include_prerelease,
            )
        except PicopakException as e:
            return report_error(e, output_json)

    if output_json:
        print_json(resolved.model_dump(mode="json"))
    else:
        print(f"package: {resolved.package_name}")
        print(f"version: {resolved.version}")
        print(f"platform: {resolved.platform}")
        print(f"url: {resolved.download_url}")
        print(f"checksum: {resolved.checksum or '(none)'}")
    return EXIT_SUCCESS
