"""
Runtime Configuration

Per-invocation configuration built once from the environment plus CLI
overrides and passed down by parameter. Deep logic never reads the
environment itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from dotenv import load_dotenv

from picopak.schemas.manifest import normalize_platform

DEFAULT_INDEX_URL = "https://raw.githubusercontent.com/FastLED/picopak-index/main/index.json"

_DEFAULT_HTTP_USER_AGENT = "picopak/0.1 (+https://github.com/FastLED/picopak)"


def get_index_urls(explicit_url: Optional[str] = None) -> list[str]:
    """
    Ordered candidate index URLs.

    Precedence: explicit override, PICO_PAK_INDEX_URLS (comma list),
    PICO_PAK_INDEX_URL, then the built-in default.
    """
    if explicit_url and explicit_url.strip():
        return [explicit_url.strip()]

    env_urls = [
        url.strip()
        for url in (os.getenv("PICO_PAK_INDEX_URLS") or "").split(",")
        if url.strip()
    ]
    if env_urls:
        return env_urls

    single = (os.getenv("PICO_PAK_INDEX_URL") or "").strip()
    if single:
        return [single]

    return [DEFAULT_INDEX_URL]


@dataclass
class HttpConfig:
    """Configuration for HTTP client."""
    timeout: float = 30.0
    max_redirects: int = 5
    user_agent: str = _DEFAULT_HTTP_USER_AGENT


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for one picopak invocation.

    Can be loaded from:
    - Environment variables (and a .env file)
    - Programmatic construction (tests)
    """
    index_urls: list[str] = field(default_factory=lambda: [DEFAULT_INDEX_URL])
    platform: Optional[str] = None
    http: HttpConfig = field(default_factory=HttpConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - PICO_PAK_INDEX_URLS / PICO_PAK_INDEX_URL: index candidates
        - PICO_PLATFORM: target platform override (rp2040/rp2350)
        - PICOPAK_HTTP_TIMEOUT: HTTP timeout in seconds
        """
        overrides: dict[str, Any] = {"index_urls": get_index_urls()}

        platform = normalize_platform(os.getenv("PICO_PLATFORM"))
        if platform:
            overrides["platform"] = platform


        timeout = os.getenv("PICOPAK_HTTP_TIMEOUT")
        if timeout:
            try:
                overrides.setdefault("http", {})["timeout"] = float(timeout)
            except ValueError as e:
                raise ValueError(f"PICOPAK_HTTP_TIMEOUT must be a number, got {timeout!r}") from e

        return overrides

    @classmethod
    def from_env(cls, *, index_url: Optional[str] = None, platform: Optional[str] = None) -> "RuntimeConfig":
        """
        Load configuration from environment variables.

        Explicit arguments (CLI flags) take precedence over the environment.
        """
        load_dotenv()
        config = cls.from_dict(cls._get_env_overrides())
        return config.with_overrides(index_url=index_url, platform=platform)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        http_data = data.get("http", {})
        return cls(
            index_urls=list(data.get("index_urls") or [DEFAULT_INDEX_URL]),
            platform=normalize_platform(data.get("platform")),
            http=HttpConfig(**http_data) if http_data else HttpConfig(),
            extra=data.get("extra", {}),
        )

    def with_overrides(
        self,
        *,
        index_url: Optional[str] = None,
        platform: Optional[str] = None,
    ) -> "RuntimeConfig":
        """Return a copy with CLI-level overrides applied."""
        updated = self
        if index_url and index_url.strip():
            updated = replace(updated, index_urls=[index_url.strip()])
        if platform:
            normalized = normalize_platform(platform)
            if normalized is None:
                raise ValueError(f"Unsupported platform: {platform}. Use rp2040 or rp2350.")
            updated = replace(updated, platform=normalized)
        return updated

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "index_urls": list(self.index_urls),
            "platform": self.platform,
            "http": {
                "timeout": self.http.timeout,
                "max_redirects": self.http.max_redirects,
                "user_agent": self.http.user_agent,
            },
            "extra": self.extra,
        }
