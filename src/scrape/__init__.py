"""Webpage scraping and content extraction."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .document import HtmlDocument, HtmlNode
from .fetcher import HttpFetcher, PageFetcher, create_http_client
from .models import NormalizedPageContent
from .scraper import WebpageScraper, parse_page

if TYPE_CHECKING:
    import httpx

__all__ = [
    "HtmlDocument",
    "HtmlNode",
    "HttpFetcher",
    "NormalizedPageContent",
    "PageFetcher",
    "WebpageScraper",
    "build_default_scraper",
    "create_http_client",
    "parse_page",
]


def build_default_scraper(client: httpx.AsyncClient) -> WebpageScraper:
    """Build a scraper that fetches pages over the shared HTTP client."""
    return WebpageScraper(HttpFetcher(client))
