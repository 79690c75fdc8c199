"""
CLI command modules.
"""

from picopak_cli.commands import install, listing, pack, remove, resolve, search, submit

__all__ = ["install", "listing", "pack", "remove", "resolve", "search", "submit"]
