"""Data models for the scrape submodule."""

from __future__ import annotations

from dataclasses import dataclass

UNTITLED_PAGE = "Untitled Page"


@dataclass(frozen=True)
class NormalizedPageContent:
    """Structured summary of a scraped webpage."""

    url: str
    title: str = UNTITLED_PAGE
    description: str = ""
    domain: str = ""
    content: str = ""
    tags: tuple[str, ...] = ()
    images: tuple[str, ...] = ()
