"""In-memory store for webpage records and generated posts (process lifetime only)."""

from __future__ import annotations

import logging
from dataclasses import asdict

from src.api.schemas import (
    PLATFORMS,
    ContentGenerationResponse,
    Goal,
    Platform,
    PlatformPosts,
    SocialPost,
    WebpageContent,
)
from src.scrape.models import NormalizedPageContent

logger = logging.getLogger(__name__)


class MemStorage:
    """Keeps webpage records keyed by id and by URL, and posts keyed by id."""

    def __init__(self) -> None:
        self._webpages: dict[int, WebpageContent] = {}
        self._webpage_ids_by_url: dict[str, int] = {}
        self._posts: dict[int, SocialPost] = {}
        self._next_webpage_id = 1
        self._next_post_id = 1

    async def store_webpage_content(self, page: NormalizedPageContent) -> WebpageContent:
        """Store *page*, or return the existing record for the same URL."""
        existing = await self.get_webpage_content_by_url(page.url)
        if existing is not None:
            logger.debug("webpage already stored", extra={"url": page.url, "webpage_id": existing.id})
            return existing

        record = WebpageContent(id=self._next_webpage_id, **asdict(page))
        self._next_webpage_id += 1
        self._webpages[record.id] = record
        self._webpage_ids_by_url[record.url] = record.id
        logger.debug("webpage stored", extra={"url": page.url, "webpage_id": record.id})
        return record

    async def get_webpage_content_by_url(self, url: str) -> WebpageContent | None:
        webpage_id = self._webpage_ids_by_url.get(url)
        if webpage_id is None:
            return None
        return self._webpages.get(webpage_id)

    async def get_webpage_content(self, webpage_id: int) -> WebpageContent | None:
        return self._webpages.get(webpage_id)

    async def store_social_post(
        self,
        webpage_content_id: int,
        platform: Platform,
        content: str,
        character_count: int,
        suggested_image: str | None = None,
        goal: Goal | None = None,
    ) -> SocialPost:
        post = SocialPost(
            id=self._next_post_id,
            webpage_content_id=webpage_content_id,
            platform=platform,
            content=content,
            character_count=character_count,
            suggested_image=suggested_image,
            goal=goal,
        )
        self._next_post_id += 1
        self._posts[post.id] = post
        return post

    async def get_social_posts_by_webpage_id(self, webpage_content_id: int) -> list[SocialPost]:
        return [p for p in self._posts.values() if p.webpage_content_id == webpage_content_id]

    async def get_social_post_by_platform(
        self, webpage_content_id: int, platform: Platform
    ) -> SocialPost | None:
        """Return the most recently stored post for *platform*."""
        latest: SocialPost | None = None
        for post in await self.get_social_posts_by_webpage_id(webpage_content_id):
            if post.platform == platform:
                latest = post
        return latest

    async def get_generation_results(
        self, webpage_content_id: int
    ) -> ContentGenerationResponse | None:
        """Assemble the webpage record with the latest post for every platform.

        Returns ``None`` if the webpage is unknown or any platform lacks a post.
        """
        source = await self.get_webpage_content(webpage_content_id)
        if source is None:
            return None

        posts: dict[str, SocialPost] = {}
        for platform in PLATFORMS:
            post = await self.get_social_post_by_platform(webpage_content_id, platform)
            if post is None:
                return None
            posts[platform] = post

        return ContentGenerationResponse(
            source_content=source,
            posts=PlatformPosts(**posts),
        )
