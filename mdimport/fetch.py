"""HTTP fetching of markdown documents.

Handles the download of the source document with proper error handling and
timeout management.
"""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class FetchError(Exception):
    """Markdown download error."""

    def __init__(self, message: str, status_code: int | None = None, detail: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class MarkdownFetcher:
    """Downloads markdown documents over HTTP(S)."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize fetcher.

        Args:
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub the network)
        """
        self.timeout = timeout
        self.transport = transport

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "text/markdown, text/plain;q=0.9, */*;q=0.5",
            "User-Agent": "mdimport-cli",
        }

    def fetch(self, url: str) -> str:
        """Fetch a markdown document.

        Args:
            url: Public URL of the markdown file

        Returns:
            Document text

        Raises:
            FetchError: If the request failed or the response was not successful
        """
        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = client.get(url, headers=self._get_headers())
        except httpx.TimeoutException as e:
            logger.warning("Fetching %s timed out after %.1fs", url, self.timeout)
            raise FetchError(
                "Request timed out",
                detail=f"No response from {url} within {self.timeout:.0f}s",
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Fetching %s failed: %s", url, e)
            raise FetchError("Failed to fetch markdown", detail=str(e)) from e

        if not response.is_success:
            logger.warning("Fetching %s returned HTTP %d", url, response.status_code)
            raise FetchError(
                f"Failed to fetch markdown: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                detail=response.reason_phrase,
            )

        text = response.text
        logger.debug("Fetched %d characters from %s", len(text), url)
        return text


def fetch_markdown(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Fetch a markdown document with a default fetcher.

    Args:
        url: Public URL of the markdown file
        timeout: Request timeout in seconds

    Returns:
        Document text

    Raises:
        FetchError: If the download failed
    """
    return MarkdownFetcher(timeout=timeout).fetch(url)
