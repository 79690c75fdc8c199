"""
Module 08 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    picopak install <package|file.picopak> [--project DIR] [--list] [--version V]
                    [--include-prerelease] [--platform P] [--index-url URL] [--json]
    picopak pack <source_dir> [--output DIR] [--json]
    picopak submit <artifact.picopak|metadata.json> [--output DIR] [--index-file F]
                   [--artifact-url U] [--dry-run] [--json]
    picopak resolve <package> [--version V] [--include-prerelease] [--platform P]
    picopak search <query> [--all] [--index-url URL] [--json]
    picopak list [--project DIR] [--json]
    picopak remove <package> [--project DIR]
    picopak config --init|--show [--path FILE]
    picopak version

Environment Variables:
    PICO_PAK_INDEX_URLS         Comma-separated candidate index URLs
    PICO_PAK_INDEX_URL          Single index URL
    PICO_PLATFORM               Target platform override (rp2040, rp2350)
    PICOPAK_HTTP_TIMEOUT        HTTP timeout in seconds (default: 30)
    PICOPAK_LOG_LEVEL           Log level (default: WARNING)
    PICOPAK_LOG_FILE            Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from picopak import __version__
from picopak.schemas.manifest import KNOWN_PLATFORMS
from picopak_cli.commands import install, listing, pack, remove, resolve, search, submit
from picopak_cli.commands.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from picopak_cli.config import build_runtime_config, get_default_config_template, load_config


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def _add_index_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--index-url",
        type=str,
        default=None,
        help="Use this index URL instead of the configured candidates",
    )


def _add_resolution_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--version",
        type=str,
        default=None,
        help="Install this exact version (default: latest stable)",
    )
    parser.add_argument(
        "--include-prerelease",
        action="store_true",
        default=False,
        help="Consider prerelease versions when picking the latest",
    )
    parser.add_argument(
        "--platform",
        type=str,
        choices=list(KNOWN_PLATFORMS),
        default=None,
        help="Target platform (default: PICO_PLATFORM, CMakeLists.txt, or rp2040)",
    )
    _add_index_flags(parser)


def _add_project_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project", "-p",
        type=str,
        default=".",
        help="Project directory containing libs/ (default: current directory)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="picopak",
        description="PicoPak - Package manager for Raspberry Pi Pico C/C++ libraries.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./picopak.config.json or ~/.config/picopak/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- install command ---
    install_parser = subparsers.add_parser(
        "install",
        help="Install a package into libs/",
        description="Install a package by name from the index, or from a local .picopak file.",
    )
    install_parser.add_argument(
        "package",
        type=str,
        help="Package name or path to a .picopak file",
    )
    _add_project_flag(install_parser)
    install_parser.add_argument(
        "--list", "-l",
        action="store_true",
        default=False,
        help="List package contents without installing",
    )
    _add_resolution_flags(install_parser)
    _add_json_flag(install_parser)
    install_parser.set_defaults(func=install.install_cmd)

    # --- pack command ---
    pack_parser = subparsers.add_parser(
        "pack",
        help="Create a .picopak archive from a package directory",
        description="Validate picopak.json and the package tree, then build the archive and metadata sidecar.",
    )
    pack_parser.add_argument(
        "source_dir",
        type=str,
        help="Package directory containing picopak.json",
    )
    pack_parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output directory (default: parent of source_dir)",
    )
    _add_json_flag(pack_parser)
    pack_parser.set_defaults(func=pack.pack_cmd)

    # --- submit command ---
    submit_parser = subparsers.add_parser(
        "submit",
        help="Prepare an index submission bundle",
        description="Generate index entry, patch and instructions for a packed archive. Never edits the index.",
    )
    submit_parser.add_argument(
        "input",
        type=str,
        help="Path to a .picopak archive or its .metadata.json sidecar",
    )
    submit_parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Directory for the submission bundle (default: next to the metadata)",
    )
    submit_parser.add_argument(
        "--index-file",
        type=str,
        default=None,
        help="Local index.json to check and diff against",
    )
    submit_parser.add_argument(
        "--artifact-url",
        type=str,
        default=None,
        help="Hosted artifact URL or template containing {file}",
    )
    submit_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Check the index but do not write the preview or patch",
    )
    _add_json_flag(submit_parser)
    submit_parser.set_defaults(func=submit.submit_cmd)

    # --- resolve command ---
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a package to a download URL",
        description="Show which release and artifact install would pick, without downloading.",
    )
    resolve_parser.add_argument("package", type=str, help="Package name")
    _add_project_flag(resolve_parser)
    _add_resolution_flags(resolve_parser)
    _add_json_flag(resolve_parser)
    resolve_parser.set_defaults(func=resolve.resolve_cmd)

    # --- search command ---
    search_parser = subparsers.add_parser(
        "search",
        help="Search the package index",
        description="Case-insensitive search over package names and descriptions.",
    )
    search_parser.add_argument("query", type=str, help="Search text")
    search_parser.add_argument(
        "--all",
        action="store_true",
        default=False,
        help="Show every match instead of the first 20",
    )
    _add_index_flags(search_parser)
    _add_json_flag(search_parser)
    search_parser.set_defaults(func=search.search_cmd)

    # --- list command ---
    list_parser = subparsers.add_parser(
        "list",
        help="List installed packages",
        description="Show packages installed under libs/.",
    )
    _add_project_flag(list_parser)
    _add_json_flag(list_parser)
    list_parser.set_defaults(func=listing.list_cmd)

    # --- remove command ---
    remove_parser = subparsers.add_parser(
        "remove",
        aliases=["uninstall"],
        help="Remove an installed package",
        description="Delete libs/<package> from the project.",
    )
    remove_parser.add_argument("package", type=str, help="Installed package name")
    _add_project_flag(remove_parser)
    _add_json_flag(remove_parser)
    remove_parser.set_defaults(func=remove.remove_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="picopak.config.json",
        help="Path for config file (default: picopak.config.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    # --- version command ---
    version_parser = subparsers.add_parser(
        "version",
        help="Show the picopak version",
    )
    version_parser.set_defaults(func=version_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template(), encoding="utf-8")
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (PICOPAK_* and PICO_PAK_INDEX_URL).")
        return EXIT_SUCCESS

    if args.show:
        path = Path(args.path)
        config = load_config(path if path.exists() else None)
        runtime = build_runtime_config(config)
        config_dict = {
            "cli": config.to_dict(),
            "runtime": runtime.to_dict(),
        }
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: picopak config [--init|--show] [--path FILE]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def version_cmd(args: argparse.Namespace) -> int:
    """Handle version command."""
    print(f"picopak {__version__}")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=validation or integrity failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if logging.getLogger().isEnabledFor(logging.DEBUG):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
