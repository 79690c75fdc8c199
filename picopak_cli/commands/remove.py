"""
Module 08 - CLI Remove Command

Remove an installed package from <project>/libs/.

Usage:
    picopak remove FastLED
    picopak uninstall FastLED --project ./firmware
"""

from __future__ import annotations

from argparse import Namespace

from picopak.schemas.errors import PicopakException
from workflows.install import remove_installed

from picopak_cli.commands.common import EXIT_SUCCESS, print_json, report_error, wants_json


def remove_cmd(args: Namespace) -> int:
    """Delete libs/<name>."""
    output_json = wants_json(args)

    try:
        removed = remove_installed(args.package, args.project)
    except PicopakException as e:
        return report_error(e, output_json)

    if output_json:
        print_json({"success": True, "package": args.package, "path": str(removed)})
    else:
        print(f"Removed {args.package}")
        print("Remember to remove its include() line from your CMakeLists.txt.")
    return EXIT_SUCCESS
