"""
Module 08 - CLI Configuration

Configuration management for the picopak CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from picopak.config.runtime import RuntimeConfig

# Environment variable prefix
ENV_PREFIX = "PICOPAK_"

INDEX_URL_ENV_VARS = ("PICO_PAK_INDEX_URLS", "PICO_PAK_INDEX_URL")


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Index
    index_urls: list[str] = field(default_factory=list)
    platform: Optional[str] = None

    # Network
    http_timeout: Optional[float] = None

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    def to_dict(self) -> dict[str, Any]:
        return {
            "index_urls": list(self.index_urls),
            "platform": self.platform,
            "http_timeout": self.http_timeout,
            "log_level": self.log_level,
            "log_file": self.log_file,
            "default_output_format": self.default_output_format,
        }


def load_config_from_env() -> CLIConfig:
    """Load CLI-only settings from environment variables."""
    config = CLIConfig()
    config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", config.log_level)
    config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")

    config = CLIConfig()

    index_urls = data.get("index_urls", [])
    if isinstance(index_urls, str):
        index_urls = [u for u in index_urls.split(",")]
    config.index_urls = [u.strip() for u in index_urls if isinstance(u, str) and u.strip()]
    config.platform = data.get("platform", config.platform)

    timeout = data.get("http_timeout")
    config.http_timeout = float(timeout) if timeout is not None else None

    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = data.get("default_output_format", config.default_output_format)

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "picopak.config.json",
            Path.cwd() / ".picopak.json",
            Path.home() / ".config" / "picopak" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    env_config = load_config_from_env()
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = env_config.log_level
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = env_config.log_file

    return config


def build_runtime_config(
    cli_config: CLIConfig,
    *,
    index_url: Optional[str] = None,
    platform: Optional[str] = None,
) -> RuntimeConfig:
    """
    Build the per-invocation RuntimeConfig.

    Precedence: command-line flag, then environment, then config file.
    """
    runtime = RuntimeConfig.from_env()

    env_has_index = any((os.getenv(name) or "").strip() for name in INDEX_URL_ENV_VARS)
    if cli_config.index_urls and not env_has_index:
        runtime = replace(runtime, index_urls=list(cli_config.index_urls))
    if cli_config.platform and runtime.platform is None:
        runtime = runtime.with_overrides(platform=cli_config.platform)
    if cli_config.http_timeout is not None and not os.getenv(f"{ENV_PREFIX}HTTP_TIMEOUT"):
        runtime = replace(runtime, http=replace(runtime.http, timeout=cli_config.http_timeout))

    return runtime.with_overrides(index_url=index_url, platform=platform)


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "index_urls": [
    "https://raw.githubusercontent.com/FastLED/picopak-index/main/index.json"
  ],
  "platform": null,
  "http_timeout": 30,
  "log_level": "WARNING",
  "log_file": null,
  "default_output_format": "human"
}
"""
