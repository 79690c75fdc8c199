"""
Module 08 - CLI Command Helpers

Exit codes and error reporting shared by every subcommand.
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from typing import Any

from picopak.config.runtime import RuntimeConfig
from picopak.http.client import HttpClient
from picopak.schemas.errors import (
    ConflictError,
    IntegrityError,
    PicopakException,
    ValidationError,
)
from picopak_cli.config import CLIConfig, build_runtime_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def exit_code_for(error: PicopakException) -> int:
    """Validation, integrity and conflict failures exit 2; the rest exit 1."""
    if isinstance(error, (ValidationError, IntegrityError, ConflictError)):
        return EXIT_VERIFICATION_FAILED
    return EXIT_RUNTIME_ERROR


def wants_json(args: Namespace) -> bool:
    if getattr(args, "json", False):
        return True
    cli_config = getattr(args, "cli_config", None)
    return cli_config is not None and cli_config.default_output_format == "json"


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def report_error(error: PicopakException, output_json: bool) -> int:
    """Print a failure (every violation) and return its exit code."""
    if output_json:
        print_json({"success": False, "error": error.to_error_model().model_dump(mode="json")})
    else:
        violations = error.violations
        if len(violations) > 1:
            print("Error:", file=sys.stderr)
            for violation in violations:
                print(f"  - {violation}", file=sys.stderr)
        else:
            print(f"Error: {error.message}", file=sys.stderr)
    return exit_code_for(error)


def runtime_config_for(args: Namespace) -> RuntimeConfig:
    """Per-invocation RuntimeConfig from flags, environment and config file."""
    cli_config = getattr(args, "cli_config", None) or CLIConfig()
    return build_runtime_config(
        cli_config,
        index_url=getattr(args, "index_url", None),
        platform=getattr(args, "platform", None),
    )


def http_client_for(config: RuntimeConfig) -> HttpClient:
    return HttpClient(
        timeout=config.http.timeout,
        max_redirects=config.http.max_redirects,
        default_headers={"User-Agent": config.http.user_agent},
    )
