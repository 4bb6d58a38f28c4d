"""Scrape orchestrator: fetch, parse and assemble the page record."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from .document import HtmlDocument
from .extractors import (
    extract_content,
    extract_description,
    extract_domain,
    extract_images,
    extract_tags,
    extract_title,
)
from .fetcher import PageFetcher
from .models import UNTITLED_PAGE, NormalizedPageContent

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _guarded(field_name: str, url: str, extract: Callable[[], T], default: T) -> T:
    """Run one extractor, degrading to *default* if it raises."""
    try:
        return extract()
    except Exception:
        logger.warning(
            "field extraction failed, using default",
            extra={"url": url, "field": field_name},
            exc_info=True,
        )
        return default


def parse_page(url: str, html: str) -> NormalizedPageContent:
    """Build the page record from already-fetched *html*."""
    document = HtmlDocument.parse(html)

    page = NormalizedPageContent(
        url=url,
        title=_guarded("title", url, lambda: extract_title(document), UNTITLED_PAGE),
        description=_guarded("description", url, lambda: extract_description(document), ""),
        domain=extract_domain(url),
        content=_guarded("content", url, lambda: extract_content(document), ""),
        tags=tuple(_guarded("tags", url, lambda: extract_tags(document), [])),
        images=tuple(_guarded("images", url, lambda: extract_images(document, url), [])),
    )
    logger.debug(
        "page parsed",
        extra={
            "url": url,
            "title": page.title[:80],
            "content_length": len(page.content),
            "tag_count": len(page.tags),
            "image_count": len(page.images),
        },
    )
    return page


class WebpageScraper:
    """Fetches a URL and extracts a :class:`NormalizedPageContent` from it."""

    def __init__(self, fetcher: PageFetcher) -> None:
        self._fetcher = fetcher

    async def scrape(self, url: str) -> NormalizedPageContent:
        """Scrape *url*. Only the fetch can fail; it raises ``FetchError``."""
        logger.info("scraping webpage", extra={"url": url})
        html = await self._fetcher.fetch(url)
        page = parse_page(url, html)
        logger.info(
            "webpage scraped",
            extra={"url": url, "domain": page.domain, "content_length": len(page.content)},
        )
        return page
