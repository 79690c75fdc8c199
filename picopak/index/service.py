"""
Module 04 - Index Documents
File: service.py

Purpose: Fetch index documents from the ordered candidate URL list and
answer catalog queries (resolve, list, search) against them.

Each candidate is tried once; the first success wins. There is no
automatic retry and no local cache.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from picopak.config.runtime import RuntimeConfig
from picopak.http.client import HttpClient
from picopak.schemas.errors import FormatError, PicopakException, TransportError
from picopak.schemas.index import ResolvedRelease
from picopak.semver import sort_versions_desc

from .resolver import resolve_release
from .shapes import list_package_nodes

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 20


class IndexPackageSummary(BaseModel):
    """One catalog row: name, description and latest version."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    description: Optional[str] = None
    version: Optional[str] = None


def fetch_index_document(url: str, client: HttpClient) -> Any:
    """
    Fetch and parse one index document.

    Raises:
        TransportError: Network or HTTP failure
        FormatError: Body is not valid JSON
    """
    logger.info("Fetching index %s", url)
    return client.get(url).json()


def fetch_index(urls: list[str], client: HttpClient) -> tuple[str, Any]:
    """
    Fetch the first index that answers among the candidates.

    Returns:
        (url, parsed document)

    Raises:
        TransportError: Every candidate failed; carries the last failure's
            message.
    """
    last_error: Optional[PicopakException] = None
    for url in urls:
        try:
            return url, fetch_index_document(url, client)
        except (TransportError, FormatError) as e:
            logger.warning("Index candidate %s failed: %s", url, e.message)
            last_error = e

    message = last_error.message if last_error else "No index URL available"
    raise TransportError(f"Unable to fetch package index. {message}") from last_error


def resolve_from_candidates(
    package_name: str,
    config: RuntimeConfig,
    client: HttpClient,
    *,
    platform: str,
    version: Optional[str] = None,
    include_prerelease: bool = False,
) -> ResolvedRelease:
    """
    Resolve a package against each candidate index in order.

    The first index that yields a resolution wins. When all fail, a
    lookup failure (not found / no artifact) from the last candidate is
    re-raised as is; transport and format failures are reported as one
    TransportError carrying the last message.
    """
    last_error: Optional[PicopakException] = None
    for url in config.index_urls:
        try:
            document = fetch_index_document(url, client)
            resolved = resolve_release(
                package_name,
                document,
                platform=platform,
                version=version,
                include_prerelease=include_prerelease,
            )
        except PicopakException as e:
            logger.warning("Resolution against %s failed: %s", url, e.message)
            last_error = e
            continue
        logger.info("Resolved %s@%s from %s", resolved.package_name, resolved.version, url)
        return resolved

    if last_error is None:
        raise TransportError("No index URL available")
    if isinstance(last_error, (TransportError, FormatError)):
        raise TransportError(
            f'Unable to resolve package "{package_name}". {last_error.message}',
            retryable=last_error.retryable,
        ) from last_error
    raise last_error


def list_index_packages(index_document: Any) -> list[IndexPackageSummary]:
    """Summarize every package with its latest (by precedence) version."""
    summaries: list[IndexPackageSummary] = []
    for package in list_package_nodes(index_document):
        ordered = sort_versions_desc(package.releases, key=lambda r: r.version)
        summaries.append(IndexPackageSummary(
            name=package.name,
            description=package.description,
            version=ordered[0].version if ordered else None,
        ))
    return summaries


def search_index(
    entries: list[IndexPackageSummary],
    query: str,
    *,
    limit: Optional[int] = SEARCH_RESULT_LIMIT,
) -> list[IndexPackageSummary]:
    """Case-insensitive substring match over name and description."""
    needle = query.strip().lower()
    matches = [
        entry for entry in entries
        if needle in " ".join(filter(None, [entry.name, entry.description])).lower()
    ]
    return matches[:limit] if limit is not None else matches
