"""
Runtime Configuration Module

Provides configuration loading for a picopak invocation.
"""

from .runtime import DEFAULT_INDEX_URL, HttpConfig, RuntimeConfig, get_index_urls

__all__ = [
    "DEFAULT_INDEX_URL",
    "HttpConfig",
    "RuntimeConfig",
    "get_index_urls",
]
