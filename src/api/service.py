"""Service layer — orchestrates URL analysis for the API routes."""

from __future__ import annotations

import asyncio
import logging

from src.api.schemas import (
    PLATFORMS,
    ContentGenerationResponse,
    Platform,
    UrlAnalysisRequest,
    WebpageContent,
)
from src.generation.images import ImageService
from src.generation.posts import PostGenerator
from src.scrape import NormalizedPageContent, WebpageScraper
from src.storage.memory import MemStorage

logger = logging.getLogger(__name__)


def _page_from_record(record: WebpageContent) -> NormalizedPageContent:
    return NormalizedPageContent(
        url=record.url,
        title=record.title,
        description=record.description,
        domain=record.domain,
        content=record.content,
        tags=tuple(record.tags),
        images=tuple(record.images),
    )


async def _generate_platform_images(
    image_service: ImageService, page: NormalizedPageContent
) -> dict[Platform, str | None]:
    urls = await asyncio.gather(
        *(image_service.create(page.title, page.description, p) for p in PLATFORMS)
    )
    return dict(zip(PLATFORMS, urls))


async def analyze_url(
    body: UrlAnalysisRequest,
    scraper: WebpageScraper,
    storage: MemStorage,
    post_generator: PostGenerator,
    image_service: ImageService | None = None,
) -> ContentGenerationResponse | None:
    """Scrape (or reuse) the page, draft posts, store them and return the results.

    Raises ``FetchError`` when the page cannot be retrieved and
    ``PostGenerationError`` when drafting fails. Returns ``None`` if the stored
    results cannot be assembled.
    """
    record = await storage.get_webpage_content_by_url(body.url)
    if record is not None:
        logger.info("reusing stored webpage", extra={"url": body.url, "webpage_id": record.id})
        page = _page_from_record(record)
    else:
        page = await scraper.scrape(body.url)
        record = await storage.store_webpage_content(page)

    drafts = await post_generator.generate(page, body.goal)

    generated_images: dict[Platform, str | None] = {}
    if body.generate_images and image_service is not None:
        generated_images = await _generate_platform_images(image_service, page)
        logger.info(
            "platform images generated",
            extra={"url": body.url, "generated": sum(1 for u in generated_images.values() if u)},
        )

    for platform in PLATFORMS:
        draft = drafts[platform]
        await storage.store_social_post(
            webpage_content_id=record.id,
            platform=platform,
            content=draft.content,
            character_count=draft.character_count,
            suggested_image=generated_images.get(platform) or draft.suggested_image,
            goal=body.goal,
        )

    results = await storage.get_generation_results(record.id)
    logger.info(
        "url analysis completed",
        extra={"url": body.url, "webpage_id": record.id, "assembled": results is not None},
    )
    return results
