"""
Module 08 - CLI Search Command

Search the package index by name or description.

Usage:
    picopak search led
    picopak search "" --all
"""

from __future__ import annotations

import sys
from argparse import Namespace

from picopak.index.service import (
    SEARCH_RESULT_LIMIT,
    fetch_index,
    list_index_packages,
    search_index,
)
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


def search_cmd(args: Namespace) -> int:
    """Print index packages matching the query."""
    output_json = wants_json(args)

    try:
        config = runtime_config_for(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    with http_client_for(config) as client:
        try:
            index_url, document = fetch_index(config.index_urls, client)
            entries = list_index_packages(document)
        except PicopakException as e:
            return report_error(e, output_json)

    limit = None if args.all else SEARCH_RESULT_LIMIT
    matches = search_index(entries, args.query, limit=limit)

    if output_json:
        print_json({
            "index_url": index_url,
            "query": args.query,
            "results": [entry.model_dump(mode="json") for entry in matches],
        })
        return EXIT_SUCCESS

    if not matches:
        print(f'No packages found matching "{args.query}"')
        return EXIT_SUCCESS

    print(f"Found {len(matches)} package(s):")
    for entry in matches:
        version = f" ({entry.version})" if entry.version else ""
        print(f"  {entry.name}{version}")
        if entry.description:
            print(f"    {entry.description}")
    return EXIT_SUCCESS
