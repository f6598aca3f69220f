"""HTTP-based source re-verification."""

import asyncio
import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from ...domain.models.source import Source

logger = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPES = ("text/html", "application/json")


class HttpSourceChecker:
    """Checks a source's homepage is served over HTTPS and still responds.

    A source passes when its URL is https, a HEAD request succeeds and a
    GET returns HTML or JSON.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self._client = client
        self._timeout = timeout

    async def check(self, source: Source) -> bool:
        """Return True if the source passes every check."""
        if urlparse(source.url).scheme != "https":
            logger.info(f"🔒 Source {source.id} is not served over HTTPS")
            return False

        client = self._client or httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        try:
            accessible, has_content = await asyncio.gather(
                self._accessible(client, source.url),
                self._has_content(client, source.url),
            )
        finally:
            if self._client is None:
                await client.aclose()
        return accessible and has_content

    @staticmethod
    async def _accessible(client: httpx.AsyncClient, url: str) -> bool:
        try:
            response = await client.head(url)
            return response.is_success
        except httpx.HTTPError as e:
            logger.warning(f"⚠️ HEAD {url} failed: {e!r}")
            return False

    @staticmethod
    async def _has_content(client: httpx.AsyncClient, url: str) -> bool:
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"⚠️ GET {url} failed: {e!r}")
            return False
        content_type = response.headers.get("content-type", "")
        return response.is_success and any(t in content_type for t in ACCEPTED_CONTENT_TYPES)
