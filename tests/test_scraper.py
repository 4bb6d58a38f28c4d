"""Scrape orchestrator and fetcher tests."""

import dataclasses
from unittest.mock import patch

import httpx
import pytest

from src.errors import FetchError
from src.scrape import HttpFetcher, NormalizedPageContent, WebpageScraper, parse_page

ARTICLE_HTML = """\
<html>
<head>
  <title>Foo</title>
  <meta property="og:description" content="Bar">
  <meta property="og:image" content="/cover.jpg">
  <meta name="keywords" content="python, scraping">
</head>
<body>
  <article>Hello   world<nav>Skip</nav></article>
</body>
</html>
"""


def _scraper(handler) -> tuple[WebpageScraper, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WebpageScraper(HttpFetcher(client)), client


# --- parse_page (sync) ---


def test_parse_page_end_to_end():
    page = parse_page("https://example.com/article", ARTICLE_HTML)
    assert page == NormalizedPageContent(
        url="https://example.com/article",
        title="Foo",
        description="Bar",
        domain="example.com",
        content="Hello world",
        tags=("python", "scraping"),
        images=("https://example.com/cover.jpg",),
    )


def test_parse_page_keeps_url_unmodified():
    url = "HTTPS://Example.com/Article?utm_source=x#top"
    assert parse_page(url, ARTICLE_HTML).url == url


def test_parse_page_is_idempotent():
    first = parse_page("https://example.com/article", ARTICLE_HTML)
    second = parse_page("https://example.com/article", ARTICLE_HTML)
    assert first.content == second.content
    assert first.tags == second.tags
    assert first.images == second.images


def test_parse_page_sparse_document():
    page = parse_page("https://example.com/", "<p>hi</p>")
    assert page.title == "Untitled Page"
    assert page.description == ""
    assert page.content == "hi"
    assert page.tags == ()
    assert page.images == ()


def test_record_is_immutable():
    page = parse_page("https://example.com/article", ARTICLE_HTML)
    with pytest.raises(dataclasses.FrozenInstanceError):
        page.title = "changed"  # type: ignore[misc]


def test_failing_extractor_degrades_to_default():
    with patch("src.scrape.scraper.extract_tags", side_effect=RuntimeError("boom")):
        page = parse_page("https://example.com/article", ARTICLE_HTML)
    assert page.tags == ()
    assert page.title == "Foo"
    assert page.content == "Hello world"


def test_failing_title_extractor_uses_placeholder():
    with patch("src.scrape.scraper.extract_title", side_effect=ValueError("bad")):
        page = parse_page("https://example.com/article", ARTICLE_HTML)
    assert page.title == "Untitled Page"


# --- WebpageScraper over HTTP (async) ---


@pytest.mark.asyncio
async def test_scrape_success():
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, text=ARTICLE_HTML)

    scraper, client = _scraper(handler)
    async with client:
        page = await scraper.scrape("https://example.com/article")

    assert requested == ["https://example.com/article"]
    assert page.title == "Foo"
    assert page.content == "Hello world"


@pytest.mark.asyncio
async def test_scrape_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/article"})
        return httpx.Response(200, text=ARTICLE_HTML)

    scraper, client = _scraper(handler)
    async with client:
        page = await scraper.scrape("https://example.com/old")

    assert page.url == "https://example.com/old"
    assert page.title == "Foo"


@pytest.mark.asyncio
async def test_scrape_error_status_raises_fetch_error():
    scraper, client = _scraper(lambda request: httpx.Response(404))
    async with client:
        with pytest.raises(FetchError) as exc_info:
            await scraper.scrape("https://example.com/missing")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Failed to fetch URL: 404 Not Found"
    assert exc_info.value.url == "https://example.com/missing"


@pytest.mark.asyncio
async def test_scrape_network_failure_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("name resolution failed", request=request)

    scraper, client = _scraper(handler)
    async with client:
        with pytest.raises(FetchError) as exc_info:
            await scraper.scrape("https://unresolvable.invalid/")

    assert exc_info.value.status_code is None
    assert "name resolution failed" in exc_info.value.message
    assert exc_info.value.to_dict()["type"] == "FetchError"
