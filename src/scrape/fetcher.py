"""Page fetching over HTTP."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from src.errors import FetchError

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    """Protocol for page fetchers."""

    async def fetch(self, url: str) -> str: ...


class HttpFetcher:
    """Fetches raw HTML with a shared ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, url: str) -> str:
        """Return the response body for *url*, raising :class:`FetchError` on failure."""
        try:
            resp = await self._client.get(url, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("page fetch failed", extra={"url": url}, exc_info=True)
            raise FetchError(url, f"Failed to fetch URL: {exc}") from exc

        if not resp.is_success:
            logger.warning(
                "page fetch returned error status",
                extra={"url": url, "status_code": resp.status_code},
            )
            raise FetchError(
                url,
                f"Failed to fetch URL: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code,
            )

        logger.debug(
            "page fetched",
            extra={"url": url, "status_code": resp.status_code, "bytes": len(resp.content)},
        )
        return resp.text


def create_http_client(timeout: float, user_agent: str) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": user_agent},
    )
