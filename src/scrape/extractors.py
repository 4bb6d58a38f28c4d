"""Field extractors deriving each part of the page record from a parsed document."""

from __future__ import annotations

import logging
import re
from urllib.parse import urlparse

from pydantic import AnyUrl, TypeAdapter, ValidationError

from .document import HtmlDocument
from .models import UNTITLED_PAGE

logger = logging.getLogger(__name__)

TAG_MARKUP_SELECTOR = 'a[rel="tag"], .tag, .tags a, .category, .categories a'
MAX_MARKUP_TAGS = 10
MAX_TAG_LENGTH = 30
MAX_HEADING_TAGS = 5

CONTENT_SELECTORS: tuple[str, ...] = (
    "article",
    ".article",
    ".post-content",
    ".entry-content",
    ".content",
    "main",
    "#content",
)
CONTENT_NOISE_SELECTOR = "aside, nav, .navigation, .comments, .related, .sidebar, script, style"
BODY_NOISE_SELECTOR = "script, style, nav, header, footer"

_WHITESPACE_RE = re.compile(r"\s+")
_CAPITALIZED_RE = re.compile(r"^[A-Z]")
_URL_ADAPTER = TypeAdapter(AnyUrl)


def _unique(items: list[str]) -> list[str]:
    """Deduplicate while preserving order."""
    seen: set[str] = set()
    unique: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def extract_domain(url: str) -> str:
    """Return the hostname of *url*, or ``""`` when it is not a valid absolute URL."""
    try:
        return _URL_ADAPTER.validate_python(url).host or ""
    except ValidationError:
        return ""


def extract_title(document: HtmlDocument) -> str:
    title_node = document.select_one("title")
    title = title_node.text().strip() if title_node is not None else ""
    return (
        title
        or document.meta_content('meta[property="og:title"]')
        or document.meta_content('meta[name="twitter:title"]')
        or UNTITLED_PAGE
    )


def extract_description(document: HtmlDocument) -> str:
    return (
        document.meta_content('meta[name="description"]')
        or document.meta_content('meta[property="og:description"]')
        or document.meta_content('meta[name="twitter:description"]')
    )


def extract_tags(document: HtmlDocument) -> list[str]:
    """Derive topical tags: meta keywords, then tag markup, then heading words.

    Meta keywords are returned uncapped; markup tags are capped at 10 and
    heading-derived tags at 5.
    """
    keywords_node = document.select_one('meta[name="keywords"]')
    keywords = keywords_node.attribute("content") if keywords_node is not None else None
    if keywords:
        return _unique([k.strip() for k in keywords.split(",") if k.strip()])

    markup_tags: list[str] = []
    for node in document.select(TAG_MARKUP_SELECTOR):
        text = node.text().strip()
        if text and len(text) < MAX_TAG_LENGTH:
            markup_tags.append(text)

    if markup_tags:
        return _unique(markup_tags)[:MAX_MARKUP_TAGS]

    heading_words: list[str] = []
    for node in document.select("h1, h2, h3"):
        heading_words.extend(
            word
            for word in node.text().split()
            if len(word) > 4 and _CAPITALIZED_RE.match(word)
        )
    return _unique(heading_words)[:MAX_HEADING_TAGS]


def _absolute_image_url(src: str, base_url: str) -> str | None:
    if src.startswith("data:"):
        return None
    if src.startswith("http"):
        return src

    try:
        base = urlparse(base_url)
        host, port = base.hostname, base.port
    except ValueError:
        return None
    if not base.scheme or not host:
        return None

    if src.startswith("//"):
        return f"{base.scheme}:{src}"

    # Origin without any user:password@ from the page URL
    if ":" in host:
        host = f"[{host}]"
    origin = f"{base.scheme}://{host}" if port is None else f"{base.scheme}://{host}:{port}"
    if src.startswith("/"):
        return f"{origin}{src}"
    return f"{origin}/{src}"


def extract_images(document: HtmlDocument, base_url: str) -> list[str]:
    """Return the Open Graph and Twitter card images as absolute URLs.

    Only meta tag images are considered; inline ``<img>`` elements are ignored.
    """
    candidates = (
        document.meta_content('meta[property="og:image"]'),
        document.meta_content('meta[name="twitter:image"]'),
    )

    images: list[str] = []
    for src in candidates:
        if not src:
            continue
        absolute = _absolute_image_url(src, base_url)
        if absolute and absolute not in images:
            images.append(absolute)

    logger.debug("meta images extracted", extra={"url": base_url, "images": images})
    return images


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_content(document: HtmlDocument) -> str:
    """Locate the main article text, stripping navigation and other boilerplate.

    Works on a copy of *document* so later extractors still see the full tree.
    """
    working = document.copy()

    content = ""
    for selector in CONTENT_SELECTORS:
        nodes = working.select(selector)
        if not nodes:
            continue
        for node in nodes:
            node.remove_matching(CONTENT_NOISE_SELECTOR)
        content = "".join(node.text() for node in nodes).strip()
        logger.debug(
            "content container matched",
            extra={"selector": selector, "matches": len(nodes), "length": len(content)},
        )
        break

    if not content:
        body = working.select_one("body")
        if body is None:
            body = working.root()
            body.remove_matching("head, title")
        body.remove_matching(BODY_NOISE_SELECTOR)
        content = body.text()

    return normalize_whitespace(content)
