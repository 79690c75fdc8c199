"""
Module 08 - CLI List Command

List packages installed under <project>/libs/.

Usage:
    picopak list --project ./firmware
"""

from __future__ import annotations

from argparse import Namespace

from workflows.install import LIBS_DIR, list_installed

from picopak_cli.commands.common import EXIT_SUCCESS, print_json, wants_json


def list_cmd(args: Namespace) -> int:
    """Print installed packages."""
    installed = list_installed(args.project)

    if wants_json(args):
        print_json([package.to_dict() for package in installed])
        return EXIT_SUCCESS

    if not installed:
        print(f"No packages installed in {LIBS_DIR}/")
        return EXIT_SUCCESS

    print("Installed packages:")
    for package in installed:
        print(f"  {package.name} {package.version or '(unknown version)'}")
    return EXIT_SUCCESS
