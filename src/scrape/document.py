"""Typed wrapper over BeautifulSoup exposing the queries the extractors need."""

from __future__ import annotations

import copy

from bs4 import BeautifulSoup, Tag


class HtmlNode:
    """A single element in a parsed document."""

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def attribute(self, name: str) -> str | None:
        """Return the attribute value, joining multi-valued attributes with spaces."""
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def text(self) -> str:
        return self._tag.get_text()

    def select(self, selector: str) -> list[HtmlNode]:
        return [HtmlNode(tag) for tag in self._tag.select(selector)]

    def remove_matching(self, selector: str) -> int:
        """Remove every descendant matching *selector*; return how many were removed."""
        matches = self._tag.select(selector)
        for tag in matches:
            tag.decompose()
        return len(matches)


class HtmlDocument:
    """A parsed HTML document supporting CSS-selector lookup."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @classmethod
    def parse(cls, html: str) -> HtmlDocument:
        return cls(BeautifulSoup(html, "html.parser"))

    def select(self, selector: str) -> list[HtmlNode]:
        return [HtmlNode(tag) for tag in self._soup.select(selector)]

    def select_one(self, selector: str) -> HtmlNode | None:
        tag = self._soup.select_one(selector)
        return HtmlNode(tag) if tag is not None else None

    def meta_content(self, selector: str) -> str:
        """Return the stripped ``content`` of the first meta tag matching *selector*."""
        node = self.select_one(selector)
        if node is None:
            return ""
        return (node.attribute("content") or "").strip()

    def root(self) -> HtmlNode:
        return HtmlNode(self._soup)

    def copy(self) -> HtmlDocument:
        """Return an independent deep copy, so removals leave this document intact."""
        return HtmlDocument(copy.copy(self._soup))
