"""
HTTP Client

Fetch-bytes / follow-redirects client used for index fetches and
artifact downloads.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urljoin

import requests

from picopak.schemas.errors import FormatError, TransportError

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5
REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

_CHUNK_SIZE = 1024 * 64


@dataclass
class HttpResponse:
    """
    Response from an HTTP request.
    """
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Get response content as text."""
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """
        Parse response as JSON.

        Raises:
            FormatError: If the body is not valid JSON.
        """
        try:
            return json.loads(self.content)
        except ValueError as e:
            raise FormatError(f"Invalid JSON from {self.url}: {e}") from e


class HttpClient:
    """
    HTTP client with bounded manual redirect following.

    Redirects are followed by hand (not by requests) so the hop bound and
    the final URL are under our control. Any non-2xx terminal status is a
    TransportError.

    Usage:
        with HttpClient(timeout=30.0) as client:
            index = client.get("https://example.com/index.json").json()
            client.download("https://example.com/pkg.picopak", Path("pkg.picopak"))
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        max_redirects: int = MAX_REDIRECTS,
        default_headers: Optional[dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            timeout: Per-request timeout in seconds
            max_redirects: Maximum number of redirect hops to follow
            default_headers: Headers to include in all requests
            session: Pre-built session (tests pass a mock here)
        """
        self.timeout = timeout
        self.max_redirects = max_redirects
        self.default_headers = default_headers or {}
        self._session = session

    def _get_session(self) -> requests.Session:
        """Lazy-create the requests session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.default_headers)
        return self._session

    def _open(self, url: str, *, stream: bool) -> requests.Response:
        """
        Issue GET requests until a non-redirect response is reached.

        Raises:
            TransportError: On network failure, too many redirects, or a
                non-2xx terminal status.
        """
        session = self._get_session()
        current_url = url

        for _ in range(self.max_redirects + 1):
            try:
                response = session.get(
                    current_url,
                    headers=self.default_headers,
                    timeout=self.timeout,
                    allow_redirects=False,
                    stream=stream,
                )
            except requests.RequestException as e:
                raise TransportError(
                    f"Request failed for {current_url}: {e}",
                    url=current_url,
                    retryable=True,
                ) from e

            location = response.headers.get("Location") or response.headers.get("location")
            if response.status_code in REDIRECT_STATUSES and location:
                next_url = urljoin(current_url, location)
                logger.debug("Redirect %s -> %s", current_url, next_url)
                response.close()
                current_url = next_url
                continue

            if not 200 <= response.status_code < 300:
                response.close()
                raise TransportError(
                    f"HTTP {response.status_code} while fetching {current_url}",
                    status_code=response.status_code,
                    url=current_url,
                )
            return response

        raise TransportError(f"Too many redirects while fetching {url}", url=url)

    def get(self, url: str) -> HttpResponse:
        """Fetch a URL into memory."""
        response = self._open(url, stream=False)
        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url or url),
        )

    def download(self, url: str, destination: str | Path) -> Path:
        """
        Stream a URL to a local file.

        A partially written file is removed if the transfer fails.

        Returns:
            The destination path.
        """
        dest = Path(destination)
        dest.parent.mkdir(parents=True, exist_ok=True)
        response = self._open(url, stream=True)
        try:
            with open(dest, "wb") as f:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except requests.RequestException as e:
            dest.unlink(missing_ok=True)
            raise TransportError(f"Download interrupted for {url}: {e}", url=url, retryable=True) from e
        finally:
            response.close()
        logger.debug("Downloaded %s to %s", url, dest)
        return dest

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
